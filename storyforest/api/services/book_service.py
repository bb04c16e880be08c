"""Book service: publishing, editing, listing, deleting and narrating books."""

import base64
import binascii
import logging
from typing import Optional

from ...config.voice import DEFAULT_VOICE_ID, DEFAULT_VOICE_KEY
from ...core.elevenlabs import ElevenLabsClient
from ...core.types import parse_data_url
from ..auth.tokens import AuthUser
from ..config import get_admin_emails
from ..database.repository import AdminConfigRepository, BookRepository, DraftRepository
from ..database.storage import BlobStorage, book_prefix, page_audio_path, page_image_path
from ..errors import failed_precondition, not_found, permission_denied
from ..models.documents import Book, DraftBook, Page, now_ms
from ..models.requests import PublishStoryRequest
from ..models.responses import BookAudioResponse

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "English"


def cover_for_draft(draft: DraftBook) -> str:
    """Protagonist image, else the first page's image, else empty."""
    if draft.protagonist_image:
        return draft.protagonist_image
    if draft.pages and draft.pages[0].image_url:
        return draft.pages[0].image_url
    return ""


def pages_from_draft(draft: DraftBook) -> list[Page]:
    return [Page(page_number=p.page_number, text=p.text, image_url=p.image_url or "") for p in draft.pages]


class BookService:
    """
    Service for the published library.

    Args:
        books: Book repository
        drafts: Draft repository
        storage: Blob storage for page images and narration
        admins: Admin config repository (for official content and edit rights)
        elevenlabs: Optional ElevenLabs client for narration
    """

    def __init__(
        self,
        books: BookRepository,
        drafts: DraftRepository,
        storage: BlobStorage,
        admins: AdminConfigRepository,
        elevenlabs: Optional[ElevenLabsClient] = None,
    ):
        self.books = books
        self.drafts = drafts
        self.storage = storage
        self.admins = admins
        self.elevenlabs = elevenlabs

    async def _store_page_image(self, book_id: str, page_number: int, image: Optional[str]) -> str:
        """
        Upload a base64 or data-URL page image and return its URL.

        http(s) URLs pass through. A failed upload gives an empty URL.
        """
        if not image:
            return ""
        if image.startswith(("http://", "https://")):
            return image

        try:
            mime_type, data = parse_data_url(image)
            content = base64.b64decode(data)
            return await self.storage.upload_bytes(
                page_image_path(book_id, page_number),
                content,
                content_type=mime_type or "image/png",
            )
        except (binascii.Error, ValueError) as e:
            logger.error(f"Invalid image data for book {book_id} page {page_number}: {e}")
        except Exception as e:
            logger.error(f"Failed to upload image for book {book_id} page {page_number}: {e}")
        return ""

    async def publish_book(self, author_id: str, story: PublishStoryRequest) -> str:
        """Save a generated story to the library. Returns the new book id."""
        variables = story.variables
        child_name = variables.child_name if variables and variables.child_name else "your child"

        book = Book(
            title=story.title,
            author_id=author_id,
            description=f"A special story for {child_name}",
            style=story.style,
            original_language=(variables.target_language if variables else None) or DEFAULT_LANGUAGE,
            variables=variables.model_dump(by_alias=True, exclude_none=True) if variables else None,
        )
        book_id = await self.books.create_book(book)

        pages: list[Page] = []
        cover_url = ""
        for page in story.pages:
            image_url = await self._store_page_image(book_id, page.page_number, page.image_url)
            if page.page_number == 1 and image_url:
                cover_url = image_url
            pages.append(Page(page_number=page.page_number, text=page.text, image_url=image_url))

        await self.books.set_pages(book_id, pages)
        if cover_url:
            await self.books.update_book(book_id, {"coverUrl": cover_url})

        logger.info(f"Published book {book_id} ({len(pages)} pages)")
        return book_id

    async def publish_draft(self, draft: Optional[DraftBook]) -> str:
        """Publish a saved draft whose pages all have text. Returns the new book id."""
        if draft is None or not draft.id:
            raise failed_precondition("Draft must be saved before publishing")
        if not draft.pages or any(not p.text or not p.text.strip() for p in draft.pages):
            raise failed_precondition("All pages must have text before publishing")

        book = Book(
            title=draft.title,
            author_id=draft.author_id,
            cover_url=cover_for_draft(draft),
            description=draft.protagonist or "",
            style=draft.style or "",
            draft_id=draft.id,
            original_language=draft.original_language or DEFAULT_LANGUAGE,
        )
        book_id = await self.books.create_book(book)
        await self.books.set_pages(book_id, pages_from_draft(draft))
        await self.drafts.mark_published(draft.id, book_id)

        logger.info(f"Published draft {draft.id} as book {book_id}")
        return book_id

    async def update_published_book(self, book_id: str, draft: DraftBook) -> None:
        """Replace a book's metadata and pages from a draft, keeping author and createdAt."""
        if not await self.books.book_exists(book_id):
            raise not_found(f"Book {book_id} not found")

        await self.books.update_book(
            book_id,
            {
                "title": draft.title,
                "coverUrl": cover_for_draft(draft),
                "description": draft.protagonist or "",
                "style": draft.style or "",
                "updatedAt": now_ms(),
            },
        )
        await self.books.replace_pages(book_id, pages_from_draft(draft))
        logger.info(f"Updated book {book_id}")

    async def get_book(self, book_id: str) -> Book:
        book = await self.books.get_book(book_id)
        if book is None:
            raise not_found(f"Book {book_id} not found")
        return book

    async def list_user_books(self, user_id: str) -> list[Book]:
        return await self.books.list_books_by_author(user_id)

    async def list_all_books(self) -> list[Book]:
        return await self.books.list_all_books()

    async def list_official_books(self) -> list[Book]:
        """Books authored by the registered admins."""
        return await self.books.list_books_by_authors(await self.admins.get_admin_ids())

    async def is_admin(self, user: AuthUser) -> bool:
        if user.email and user.email.lower() in get_admin_emails():
            return True
        return user.uid in await self.admins.get_admin_ids()

    async def ensure_can_edit(self, book_id: str, user: AuthUser) -> Book:
        """Return the book if the caller is its author or an admin."""
        book = await self.books.get_book(book_id, include_pages=False)
        if book is None:
            raise not_found(f"Book {book_id} not found")
        if book.author_id != user.uid and not await self.is_admin(user):
            raise permission_denied("Only the author can modify this book")
        return book

    async def delete_book(self, book_id: str) -> None:
        """Delete pages, then stored files (best effort), then the book document."""
        await self.books.delete_pages(book_id)
        await self.books.delete_translations(book_id)

        try:
            deleted = await self.storage.delete_prefix(book_prefix(book_id))
            logger.info(f"Deleted {deleted} stored files for book {book_id}")
        except Exception as e:
            logger.warning(f"Storage cleanup failed for book {book_id}: {e}")

        await self.books.delete_book_document(book_id)
        logger.info(f"Deleted book {book_id}")

    async def generate_book_audio(
        self,
        book_id: str,
        voice_id: Optional[str] = None,
        language: Optional[str] = None,
    ) -> BookAudioResponse:
        """
        Narrate a book into each page's audioUrls map.

        The key is the voice id or "default"; with a language the cached
        translation is narrated under "<key>_<language>". Pages that already
        have audio for the key are skipped.
        """
        if self.elevenlabs is None or not self.elevenlabs.is_configured:
            raise failed_precondition("ElevenLabs API key not configured")

        book = await self.get_book(book_id)
        voice_key = voice_id or DEFAULT_VOICE_KEY

        texts = {page.page_number: page.text for page in book.pages}
        if language:
            translation = await self.books.get_translation(book_id, language)
            if translation is None:
                raise not_found(f"No cached {language} translation for book {book_id}")
            texts = {int(number): text for number, text in translation.pages.items()}
            voice_key = f"{voice_key}_{language}"

        result = BookAudioResponse(voice_key=voice_key)
        for page in book.pages:
            text = texts.get(page.page_number)
            if not text:
                continue
            if page.audio_urls.get(voice_key):
                result.skipped += 1
                continue

            try:
                audio = await self.elevenlabs.generate_speech(text, voice_id or DEFAULT_VOICE_ID)
                url = await self.storage.upload_bytes(
                    page_audio_path(book_id, page.page_number, voice_key),
                    audio,
                    content_type="audio/mpeg",
                )
                await self.books.set_page_audio_url(book_id, page.page_number, voice_key, url)
                result.generated += 1
            except Exception as e:
                result.failed += 1
                logger.error(f"Narration failed for book {book_id} page {page.page_number}: {e}")

        logger.info(
            f"Book {book_id} narration ({voice_key}): {result.generated} generated, "
            f"{result.skipped} skipped, {result.failed} failed"
        )
        return result