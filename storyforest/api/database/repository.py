"""Repositories for Firestore persistence.

Each repository takes the async Firestore client in its constructor.
Documents are converted through the models in ..models.documents.
"""

import logging
from typing import Iterable, Optional

from google.cloud.firestore import DELETE_FIELD, ArrayUnion, Query
from google.cloud.firestore_v1.base_query import FieldFilter

from .. import config
from ..models.documents import (
    AdminConfig,
    AudioFileRecord,
    Book,
    DraftBook,
    DraftPage,
    Page,
    SavedVoice,
    TranslatedBook,
    UserProfile,
    UserSettings,
    now_ms,
)
from ..models.enums import DraftStatus, GenerationStatus, ImageStatus

logger = logging.getLogger(__name__)

# Firestore limits
MAX_BATCH_WRITES = 500
MAX_IN_FILTER = 30


def _chunks(items: list, size: int) -> Iterable[list]:
    for i in range(0, len(items), size):
        yield items[i:i + size]


async def _delete_collection(db, collection_ref) -> int:
    """Delete every document in a (sub)collection in batches."""
    deleted = 0
    refs = [doc.reference async for doc in collection_ref.stream()]
    for chunk in _chunks(refs, MAX_BATCH_WRITES):
        batch = db.batch()
        for ref in chunk:
            batch.delete(ref)
        await batch.commit()
        deleted += len(chunk)
    return deleted


async def _write_pages(db, collection_ref, pages: list) -> None:
    """Write page documents keyed by page number."""
    for chunk in _chunks(pages, MAX_BATCH_WRITES):
        batch = db.batch()
        for page in chunk:
            batch.set(collection_ref.document(str(page.page_number)), page.to_firestore())
        await batch.commit()


class BookRepository:
    """Repository for published books, their pages and translations."""

    def __init__(self, db):
        self.db = db
        self.books = db.collection(config.BOOKS)

    def _pages(self, book_id: str):
        return self.books.document(book_id).collection(config.PAGES)

    async def create_book(self, book: Book) -> str:
        """Create a book document with an auto id. Pages are written separately."""
        ref = self.books.document()
        await ref.set(book.to_firestore())
        return ref.id

    async def update_book(self, book_id: str, fields: dict) -> None:
        await self.books.document(book_id).update(fields)

    async def book_exists(self, book_id: str) -> bool:
        snap = await self.books.document(book_id).get()
        return snap.exists

    async def get_book(self, book_id: str, include_pages: bool = True) -> Optional[Book]:
        """Get a book, with pages ordered by page number."""
        snap = await self.books.document(book_id).get()
        if not snap.exists:
            return None

        book = Book.from_firestore(snap.to_dict(), id=snap.id)
        if include_pages:
            book.pages = await self.get_pages(book_id)
        return book

    async def get_pages(self, book_id: str) -> list[Page]:
        query = self._pages(book_id).order_by("pageNumber")
        return [Page.from_firestore(doc.to_dict()) async for doc in query.stream()]

    async def set_pages(self, book_id: str, pages: list[Page]) -> None:
        await _write_pages(self.db, self._pages(book_id), pages)

    async def replace_pages(self, book_id: str, pages: list[Page]) -> None:
        """Delete existing pages, then write the new ones."""
        await _delete_collection(self.db, self._pages(book_id))
        await self.set_pages(book_id, pages)

    async def set_page_audio_url(self, book_id: str, page_number: int, voice_key: str, url: str) -> None:
        """Merge one voice's narration URL into the page's audioUrls map."""
        await self._pages(book_id).document(str(page_number)).set(
            {"audioUrls": {voice_key: url}}, merge=True
        )

    async def list_books_by_author(self, author_id: str) -> list[Book]:
        """A user's books, newest first."""
        query = self.books.where(filter=FieldFilter("authorId", "==", author_id))
        books = [Book.from_firestore(doc.to_dict(), id=doc.id) async for doc in query.stream()]
        return sorted(books, key=lambda b: b.created_at, reverse=True)

    async def list_all_books(self) -> list[Book]:
        """Every book, newest first."""
        query = self.books.order_by("createdAt", direction=Query.DESCENDING)
        return [Book.from_firestore(doc.to_dict(), id=doc.id) async for doc in query.stream()]

    async def list_books_by_authors(self, author_ids: list[str]) -> list[Book]:
        """Books by any of the given authors, newest first. Empty input gives an empty list."""
        if not author_ids:
            return []

        books: list[Book] = []
        for chunk in _chunks(list(author_ids), MAX_IN_FILTER):
            query = self.books.where(filter=FieldFilter("authorId", "in", chunk))
            books.extend([Book.from_firestore(doc.to_dict(), id=doc.id) async for doc in query.stream()])
        return sorted(books, key=lambda b: b.created_at, reverse=True)

    async def reassign_author(self, from_author_id: str, to_author_id: str) -> int:
        """Move every book by one author to another. Returns the number moved."""
        query = self.books.where(filter=FieldFilter("authorId", "==", from_author_id))
        refs = [doc.reference async for doc in query.stream()]
        for chunk in _chunks(refs, MAX_BATCH_WRITES):
            batch = self.db.batch()
            for ref in chunk:
                batch.update(ref, {"authorId": to_author_id})
            await batch.commit()
        return len(refs)

    async def delete_pages(self, book_id: str) -> int:
        return await _delete_collection(self.db, self._pages(book_id))

    async def delete_translations(self, book_id: str) -> int:
        collection = self.books.document(book_id).collection(config.TRANSLATIONS)
        return await _delete_collection(self.db, collection)

    async def delete_book_document(self, book_id: str) -> None:
        await self.books.document(book_id).delete()

    async def get_translation(self, book_id: str, language: str) -> Optional[TranslatedBook]:
        ref = self.books.document(book_id).collection(config.TRANSLATIONS).document(language)
        snap = await ref.get()
        if not snap.exists:
            return None
        return TranslatedBook.from_firestore(snap.to_dict(), language=language)

    async def save_translation(self, book_id: str, translation: TranslatedBook) -> None:
        ref = self.books.document(book_id).collection(config.TRANSLATIONS).document(translation.language)
        await ref.set(translation.to_firestore())


class DraftRepository:
    """Repository for editor drafts and their pages."""

    def __init__(self, db):
        self.db = db
        self.drafts = db.collection(config.DRAFTS)

    def _pages(self, draft_id: str):
        return self.drafts.document(draft_id).collection(config.PAGES)

    async def save_draft(self, draft: DraftBook) -> str:
        """
        Create or overwrite a draft and its pages.

        New drafts get createdAt; updatedAt is always refreshed.

        Returns:
            The draft id
        """
        now = now_ms()
        draft.updated_at = now

        ref = self.drafts.document(draft.id) if draft.id else self.drafts.document()
        draft.created_at = draft.created_at or now

        await ref.set(draft.to_firestore())
        await _write_pages(self.db, self._pages(ref.id), draft.pages)
        logger.info(f"Saved draft {ref.id} with {len(draft.pages)} pages")
        return ref.id

    async def update_page_image(self, draft_id: str, page_number: int, image_url: str) -> None:
        await self._pages(draft_id).document(str(page_number)).update(
            {"imageUrl": image_url, "imageStatus": ImageStatus.COMPLETE.value}
        )

    async def get_draft(self, draft_id: str) -> Optional[DraftBook]:
        """Get a draft with pages sorted by page number."""
        snap = await self.drafts.document(draft_id).get()
        if not snap.exists:
            return None

        pages = [DraftPage.from_firestore(doc.to_dict()) async for doc in self._pages(draft_id).stream()]
        draft = DraftBook.from_firestore(snap.to_dict(), id=snap.id)
        draft.pages = sorted(pages, key=lambda p: p.page_number)
        return draft

    async def list_drafts(self, author_id: str) -> list[DraftBook]:
        """A user's drafts without pages, most recently touched first."""
        query = self.drafts.where(filter=FieldFilter("authorId", "==", author_id))
        drafts = [DraftBook.from_firestore(doc.to_dict(), id=doc.id) async for doc in query.stream()]
        return sorted(drafts, key=lambda d: d.sort_key, reverse=True)

    async def mark_published(self, draft_id: str, book_id: str) -> None:
        await self.drafts.document(draft_id).update(
            {
                "status": DraftStatus.PUBLISHED.value,
                "publishedBookId": book_id,
                "updatedAt": now_ms(),
            }
        )

    async def delete_draft(self, draft_id: str) -> None:
        """Delete the pages, then the draft document."""
        await _delete_collection(self.db, self._pages(draft_id))
        await self.drafts.document(draft_id).delete()


class UserRepository:
    """Repository for user profiles and settings."""

    def __init__(self, db):
        self.db = db
        self.users = db.collection(config.USERS)
        self.settings = db.collection(config.USER_SETTINGS)

    async def get_user(self, uid: str) -> Optional[UserProfile]:
        snap = await self.users.document(uid).get()
        if not snap.exists:
            return None
        return UserProfile.from_firestore(snap.to_dict(), uid=uid)

    async def update_user(self, uid: str, fields: dict) -> None:
        """Merge fields into users/{uid}, creating it if needed."""
        await self.users.document(uid).set(fields, merge=True)

    async def start_voice_generation(self, uid: str, voice_id: str) -> None:
        await self.update_user(
            uid,
            {
                "elevenlabs_voice_id": voice_id,
                "generation_status": GenerationStatus.PROCESSING.value,
                "last_generation_request": now_ms(),
            },
        )

    async def set_generation_status(self, uid: str, status: GenerationStatus) -> None:
        fields = {"generation_status": status.value}
        if status == GenerationStatus.COMPLETE:
            fields["last_generation_at"] = now_ms()
        await self.update_user(uid, fields)

    async def clear_voice(self, uid: str) -> None:
        await self.users.document(uid).update({"elevenlabs_voice_id": DELETE_FIELD})

    async def get_settings(self, uid: str) -> UserSettings:
        """Get a user's settings; missing settings mean the default narrator."""
        snap = await self.settings.document(uid).get()
        if not snap.exists:
            return UserSettings()
        return UserSettings.from_firestore(snap.to_dict())

    async def save_settings(self, uid: str, settings: UserSettings) -> None:
        await self.settings.document(uid).set(settings.to_firestore(), merge=True)


class VoiceRepository:
    """Repository for a user's saved voices."""

    def __init__(self, db):
        self.db = db
        self.voices = db.collection(config.VOICES)

    async def save_voice(self, voice: SavedVoice) -> None:
        await self.voices.document(voice.id).set(voice.to_firestore())

    async def get_voice(self, voice_id: str) -> Optional[SavedVoice]:
        snap = await self.voices.document(voice_id).get()
        if not snap.exists:
            return None
        return SavedVoice.from_firestore(snap.to_dict(), id=voice_id)

    async def list_voices(self, user_id: str) -> list[SavedVoice]:
        """A user's voices, newest first."""
        query = self.voices.where(filter=FieldFilter("userId", "==", user_id))
        voices = [SavedVoice.from_firestore(doc.to_dict(), id=doc.id) async for doc in query.stream()]
        return sorted(voices, key=lambda v: v.created_at, reverse=True)

    async def delete_voice(self, voice_id: str) -> None:
        await self.voices.document(voice_id).delete()


class AudioFileRepository:
    """Repository for cloned-voice narration records."""

    def __init__(self, db):
        self.db = db
        self.files = db.collection(config.USER_AUDIO_FILES)

    async def save_record(self, record: AudioFileRecord) -> None:
        await self.files.document(record.doc_id).set(record.to_firestore())


class AdminConfigRepository:
    """Repository for the config/admins singleton."""

    def __init__(self, db):
        self.db = db
        self.ref = db.collection(config.CONFIG).document(config.ADMINS_DOC)

    async def get(self) -> Optional[AdminConfig]:
        snap = await self.ref.get()
        if not snap.exists:
            return None
        return AdminConfig.from_firestore(snap.to_dict())

    async def get_admin_ids(self) -> list[str]:
        admin_config = await self.get()
        return admin_config.uids if admin_config else []

    async def create(self, uid: str) -> None:
        await self.ref.set({"uids": [uid]})

    async def add_uid(self, uid: str) -> None:
        await self.ref.update({"uids": ArrayUnion([uid])})

    async def set_uids(self, uids: list[str]) -> None:
        """Replace the uid list, keeping the other fields."""
        await self.ref.set({"uids": uids}, merge=True)

    async def mark_migrated(self) -> None:
        await self.ref.set({"migrated": True}, merge=True)
