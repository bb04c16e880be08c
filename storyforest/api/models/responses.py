"""Pydantic models for API responses."""

from typing import Optional

from pydantic import Field

from .documents import Book, CamelModel, DraftBook, SavedVoice, TranslatedBook
from .enums import GenerationStatus


class GeneratedPageResponse(CamelModel):
    page_number: int
    text: str
    image_url: Optional[str] = None


class GeneratedStoryResponse(CamelModel):
    """A generated story. Pages whose illustration failed have no imageUrl."""

    title: str
    style: str
    pages: list[GeneratedPageResponse]


class TextResponse(CamelModel):
    text: str


class ImageResponse(CamelModel):
    """A data:<mime>;base64,<data> URL."""

    image_url: str


class VoiceIdResponse(CamelModel):
    voice_id: str


class AudioResponse(CamelModel):
    audio_base64: str


class RegisterVoiceResponse(CamelModel):
    success: bool = True
    voice_id: str
    status: GenerationStatus = GenerationStatus.PROCESSING


class VoiceStatusResponse(CamelModel):
    status: GenerationStatus
    has_active_voice: bool = False


class SavedVoiceListResponse(CamelModel):
    voices: list[SavedVoice]


class SelectedVoiceResponse(CamelModel):
    voice_id: Optional[str] = None


class IdResponse(CamelModel):
    id: str


class BookListResponse(CamelModel):
    books: list[Book]


class DraftListResponse(CamelModel):
    drafts: list[DraftBook]


class TranslationResponse(TranslatedBook):
    """A cached or fresh translation of a book."""

    cached: bool = False


class BookAudioResponse(CamelModel):
    voice_key: str
    generated: int = 0
    skipped: int = 0
    failed: int = 0


class AdminLoginResponse(CamelModel):
    success: bool = True
    migrated_books: int = 0


class AdminConfigResponse(CamelModel):
    uids: list[str] = Field(default_factory=list)
    migrated: bool = False
