"""Shared enums for API models."""

from enum import Enum


class DraftStatus(str, Enum):
    """Lifecycle of a draft book in the editor."""

    EDITING = "editing"
    GENERATING = "generating"
    READY = "ready"
    PUBLISHED = "published"


class ImageStatus(str, Enum):
    """Illustration state of a draft page."""

    PENDING = "pending"
    GENERATING = "generating"
    COMPLETE = "complete"


class GenerationStatus(str, Enum):
    """State of a user's cloned-voice narration job."""

    IDLE = "idle"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"
