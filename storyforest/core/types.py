"""
Centralized domain types for Storyforest generation.

Dataclasses shared between the generation modules and the API layer
live here to keep the data flow explicit and avoid circular imports.
"""

import base64
import binascii
from dataclasses import dataclass, field
from io import BytesIO
from typing import Optional, TYPE_CHECKING

from ..config.story import (
    STORY_CONSTANTS,
    get_art_style_prompt,
    get_interest_labels,
    get_message_label,
)

if TYPE_CHECKING:
    from PIL import Image


# =============================================================================
# Child Profile
# =============================================================================


@dataclass
class ChildProfile:
    """What the wizard collected about the child and the story they want."""

    child_name: str
    child_age: int
    interests: list[str] = field(default_factory=list)
    message: str = ""
    custom_message: Optional[str] = None
    target_language: str = STORY_CONSTANTS["default_language"]
    art_style: Optional[str] = None

    @property
    def style_prompt(self) -> str:
        return get_art_style_prompt(self.art_style)

    @property
    def interest_labels(self) -> list[str]:
        return get_interest_labels(self.interests)

    @property
    def message_label(self) -> str:
        return get_message_label(self.message, self.custom_message)


def parse_data_url(value: str) -> tuple[Optional[str], str]:
    """Split "data:<mime>;base64,<data>" into (mime, data). Bare base64 gives (None, value)."""
    if value.startswith("data:") and "," in value:
        header, data = value.split(",", 1)
        mime_type = header[len("data:"):].split(";", 1)[0] or None
        return mime_type, data
    return None, value


@dataclass
class InlineImage:
    """A base64 image sent by the client (reference image or family photo)."""

    mime_type: str
    data: str  # base64, without the data: prefix
    label: Optional[str] = None

    def to_bytes(self) -> bytes:
        """Decode the base64 payload.

        Raises:
            ValueError: If the payload is not valid base64
        """
        try:
            return base64.b64decode(self.data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 image data: {e}") from e

    def to_pil_image(self) -> "Image.Image":
        """Convert to a PIL Image for multimodal prompts."""
        from PIL import Image

        return Image.open(BytesIO(self.to_bytes()))


# =============================================================================
# Illustration Types
# =============================================================================


@dataclass(frozen=True)
class AspectRatio:
    """Aspect ratio wording used in illustration prompts."""

    label: str
    size: str
    orientation: str


ASPECT_RATIOS = {
    "16:9": AspectRatio(label="16:9 widescreen landscape", size="1920x1080", orientation="landscape"),
    "3:4": AspectRatio(label="3:4 portrait", size="768x1024", orientation="portrait"),
    "1:1": AspectRatio(label="1:1 square", size="1024x1024", orientation="square"),
}
DEFAULT_ASPECT_RATIO = "16:9"


def get_aspect_ratio(key: Optional[str]) -> AspectRatio:
    """Look up an aspect ratio, defaulting to 16:9 landscape."""
    return ASPECT_RATIOS.get(key or DEFAULT_ASPECT_RATIO, ASPECT_RATIOS[DEFAULT_ASPECT_RATIO])


@dataclass
class StoryContext:
    """Where the page being illustrated sits in its story."""

    title: str
    page_number: int
    total_pages: int
    previous_texts: list[str] = field(default_factory=list)
    character_name: Optional[str] = None

    def to_prompt_string(self) -> str:
        lines = [
            "STORY CONTEXT:",
            f'Title: "{self.title}"',
            f"Current Page: {self.page_number} of {self.total_pages}",
        ]
        if self.previous_texts:
            first = self.page_number - len(self.previous_texts)
            lines.append("PREVIOUS PAGES:")
            for i, text in enumerate(self.previous_texts):
                lines.append(f'  Page {first + i}: "{text}"')
        return "\n".join(lines)


@dataclass
class GeneratedImage:
    """An illustration returned by the image model."""

    mime_type: str
    data: bytes

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode()
        return f"data:{self.mime_type};base64,{encoded}"


# =============================================================================
# Story Types
# =============================================================================


@dataclass
class StoryPageDraft:
    """A page of text as written by the story model, before illustration."""

    page_number: int
    text: str


@dataclass
class StoryText:
    """Title and pages as written by the story model."""

    title: str
    pages: list[StoryPageDraft]

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass
class GeneratedPage:
    """A finished page. image_url is None when illustration failed."""

    page_number: int
    text: str
    image_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {"pageNumber": self.page_number, "text": self.text, "imageUrl": self.image_url}


@dataclass
class GeneratedStory:
    """A complete illustrated story."""

    title: str
    style: str
    pages: list[GeneratedPage]

    @property
    def illustrated_count(self) -> int:
        return sum(1 for p in self.pages if p.image_url)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "style": self.style,
            "pages": [p.to_dict() for p in self.pages],
        }
