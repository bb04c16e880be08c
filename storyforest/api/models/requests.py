"""Pydantic models for API requests.

Bodies use the camelCase keys the web client sends. Required-field checks
that map to invalid-argument happen in the services, so most fields are
optional here.
"""

from typing import Any, Optional

from pydantic import Field

from .documents import CamelModel, DraftBook


class StoryVariables(CamelModel):
    """What the story wizard collected."""

    child_name: Optional[str] = None
    child_age: Optional[int] = None
    interests: list[str] = Field(default_factory=list)
    message: str = ""
    custom_message: Optional[str] = None
    target_language: Optional[str] = None
    art_style: Optional[str] = None


class PhotoStoryVariables(StoryVariables):
    """Story wizard input plus an optional family photo."""

    photo_base64: Optional[str] = None
    photo_mime_type: Optional[str] = None
    photo_description: Optional[str] = None


class TranslateRequest(CamelModel):
    text: Optional[str] = None
    target_language: Optional[str] = None


class ReferenceImage(CamelModel):
    """A base64 image passed to the illustrator for consistency."""

    mime_type: Optional[str] = None
    data: Optional[str] = None
    label: Optional[str] = None


class StoryContextRequest(CamelModel):
    title: str = ""
    page_number: int = 1
    total_pages: int = 1
    previous_texts: list[str] = Field(default_factory=list)
    character_name: Optional[str] = None


class GenerateImageRequest(CamelModel):
    prompt: Optional[str] = None
    style: Optional[str] = None
    reference_images: list[ReferenceImage] = Field(default_factory=list)
    aspect_ratio: Optional[str] = None
    context: Optional[StoryContextRequest] = None


class GeminiGenerateRequest(CamelModel):
    """Raw prompt for the Gemini text proxy, with settings in Gemini REST shape."""

    prompt: Optional[str] = None
    generation_config: Optional[dict[str, Any]] = None
    safety_settings: Optional[list[dict[str, Any]]] = None


# =============================================================================
# Voice
# =============================================================================


class AddVoiceRequest(CamelModel):
    name: Optional[str] = None
    audio_base64: Optional[str] = None
    description: Optional[str] = None


class SpeechRequest(CamelModel):
    text: Optional[str] = None
    voice_id: Optional[str] = None


class RegisterVoiceRequest(CamelModel):
    storage_path: Optional[str] = None
    name: Optional[str] = None


class SaveVoiceRequest(CamelModel):
    voice_id: str
    name: str
    sample_storage_path: Optional[str] = None


class SelectVoiceRequest(CamelModel):
    """A null voice id selects the default narrator."""

    voice_id: Optional[str] = None


# =============================================================================
# Books and drafts
# =============================================================================


class PublishPage(CamelModel):
    page_number: int
    text: str = ""
    image_url: Optional[str] = None


class PublishStoryRequest(CamelModel):
    """A generated story being saved to the library."""

    title: str
    style: str = ""
    pages: list[PublishPage] = Field(default_factory=list)
    variables: Optional[StoryVariables] = None


class SaveDraftRequest(DraftBook):
    """A draft sent by the editor. authorId is taken from the caller."""


class UpdatePageImageRequest(CamelModel):
    image_url: str


class BookAudioRequest(CamelModel):
    """Narrate a book.

    A missing voice id uses the default narrator. A language narrates the
    book's cached translation instead of the original text.
    """

    voice_id: Optional[str] = None
    language: Optional[str] = None


class UpdateUserSettingsRequest(CamelModel):
    selected_voice_id: Optional[str] = None
    preferred_language: Optional[str] = None
