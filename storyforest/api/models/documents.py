"""Pydantic models for Firestore documents.

Field names are snake_case in Python and camelCase in Firestore; a few
legacy fields (photoURL, elevenlabs_voice_id, generation_status) keep
their stored spelling through explicit aliases.
"""

import time
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import DraftStatus, GenerationStatus, ImageStatus


def now_ms() -> int:
    """Current time as milliseconds since the epoch."""
    return int(time.time() * 1000)


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )


class FirestoreDocument(CamelModel):
    """A model stored as a single Firestore document."""

    # Fields held elsewhere (document id, subcollections)
    excluded_fields: ClassVar[set[str]] = set()

    def to_firestore(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, exclude=self.excluded_fields)

    @classmethod
    def from_firestore(cls, data: Optional[dict[str, Any]], **extra: Any):
        return cls.model_validate({**(data or {}), **extra})


# =============================================================================
# Books
# =============================================================================


class Page(FirestoreDocument):
    """books/{bookId}/pages/{pageNumber}"""

    page_number: int
    text: str = ""
    image_url: str = ""
    audio_urls: dict[str, str] = Field(default_factory=dict)


class Book(FirestoreDocument):
    """books/{bookId}, with its pages loaded separately."""

    excluded_fields: ClassVar[set[str]] = {"id", "pages"}

    id: Optional[str] = None
    title: str
    author_id: str
    cover_url: str = ""
    description: str = ""
    style: str = ""
    created_at: int = Field(default_factory=now_ms)
    updated_at: Optional[int] = None
    original_language: Optional[str] = None
    draft_id: Optional[str] = None
    variables: Optional[dict[str, Any]] = None
    pages: list[Page] = Field(default_factory=list)


class TranslatedBook(FirestoreDocument):
    """books/{bookId}/translations/{language}. Page keys are page numbers as strings."""

    excluded_fields: ClassVar[set[str]] = {"language"}

    language: Optional[str] = None
    title: str = ""
    description: str = ""
    pages: dict[str, str] = Field(default_factory=dict)


# =============================================================================
# Drafts
# =============================================================================


class DraftPage(FirestoreDocument):
    """drafts/{draftId}/pages/{pageNumber}"""

    page_number: int
    text: str = ""
    image_url: Optional[str] = None
    image_status: ImageStatus = ImageStatus.PENDING


class DraftBook(FirestoreDocument):
    """drafts/{draftId}, with its pages loaded separately."""

    excluded_fields: ClassVar[set[str]] = {"id", "pages"}

    id: Optional[str] = None
    title: str = ""
    author_id: str = ""
    protagonist: str = ""
    protagonist_image: Optional[str] = None
    characters: list[dict[str, Any]] = Field(default_factory=list)
    style: str = ""
    style_image: Optional[str] = None
    page_count: int = 0
    prompt: str = ""
    status: DraftStatus = DraftStatus.EDITING
    created_at: Optional[int] = None
    updated_at: Optional[int] = None
    original_language: Optional[str] = None
    published_book_id: Optional[str] = None
    pages: list[DraftPage] = Field(default_factory=list)

    @property
    def sort_key(self) -> int:
        return self.updated_at or self.created_at or 0


# =============================================================================
# Users
# =============================================================================


class UserProfile(FirestoreDocument):
    """users/{uid}"""

    excluded_fields: ClassVar[set[str]] = {"uid"}

    uid: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    preferred_language: Optional[str] = None
    elevenlabs_voice_id: Optional[str] = Field(default=None, alias="elevenlabs_voice_id")
    generation_status: GenerationStatus = Field(default=GenerationStatus.IDLE, alias="generation_status")


class UserSettings(FirestoreDocument):
    """userSettings/{uid}. A null selectedVoiceId means the default narrator.

    preferredLanguage is stored on users/{uid} and only filled in for responses.
    """

    selected_voice_id: Optional[str] = None
    preferred_language: Optional[str] = None

    def to_firestore(self) -> dict[str, Any]:
        # selectedVoiceId is written even when null
        return {"selectedVoiceId": self.selected_voice_id}


class SavedVoice(FirestoreDocument):
    """voices/{voiceId}"""

    id: str
    name: str
    user_id: str
    created_at: int = Field(default_factory=now_ms)
    sample_storage_path: Optional[str] = None


class AudioFileRecord(FirestoreDocument):
    """user_audio_files/{uid}_{bookId}_{pageNumber}"""

    user_id: str
    book_id: str
    page_number: int
    storage_path: str
    created_at: int = Field(default_factory=now_ms)

    @property
    def doc_id(self) -> str:
        return f"{self.user_id}_{self.book_id}_{self.page_number}"


class AdminConfig(FirestoreDocument):
    """config/admins"""

    uids: list[str] = Field(default_factory=list)
    migrated: bool = False
