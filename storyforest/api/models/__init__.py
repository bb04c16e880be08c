"""Pydantic models for documents, API requests and responses."""

from .documents import (
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
from .enums import DraftStatus, GenerationStatus, ImageStatus

__all__ = [
    "AdminConfig",
    "AudioFileRecord",
    "Book",
    "DraftBook",
    "DraftPage",
    "Page",
    "SavedVoice",
    "TranslatedBook",
    "UserProfile",
    "UserSettings",
    "now_ms",
    "DraftStatus",
    "GenerationStatus",
    "ImageStatus",
]
