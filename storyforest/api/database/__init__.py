"""Firestore repositories and Cloud Storage access."""

from .firebase import get_bucket, get_firestore, init_firebase
from .repository import (
    AdminConfigRepository,
    AudioFileRepository,
    BookRepository,
    DraftRepository,
    UserRepository,
    VoiceRepository,
)
from .storage import BlobStorage

__all__ = [
    "get_bucket",
    "get_firestore",
    "init_firebase",
    "AdminConfigRepository",
    "AudioFileRepository",
    "BookRepository",
    "DraftRepository",
    "UserRepository",
    "VoiceRepository",
    "BlobStorage",
]
