"""
Module for writing personalised story text with Gemini.

The model is asked for a 10-15 page story as JSON. Models often wrap
JSON in markdown fences or add a sentence before it, so parsing strips
fences and keeps the outermost {...} block.
"""

import json
import logging
import re
from typing import Optional

from google.genai import types

from ...config import STORY_CONSTANTS, get_gemini_client, get_text_model, llm_retry
from ..types import ChildProfile, InlineImage, StoryPageDraft, StoryText

logger = logging.getLogger(__name__)

_FENCE_START = re.compile(r"^\s*```(?:json)?\s*\n?", re.IGNORECASE)
_FENCE_END = re.compile(r"\n?```\s*$")
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

RETURN_FORMAT = '{"title": "Title", "pages": [{"pageNumber": 1, "text": "..."}, ...]}'


class StoryParseError(ValueError):
    """Raised when the model's story output cannot be parsed."""


def parse_story_json(raw: str) -> StoryText:
    """
    Parse the model's JSON story output.

    Args:
        raw: Model output, possibly fenced or surrounded by prose

    Returns:
        StoryText with pages in the order the model gave them

    Raises:
        StoryParseError: If no valid story object can be recovered
    """
    if not raw or not raw.strip():
        raise StoryParseError("Empty story response")

    text = _FENCE_END.sub("", _FENCE_START.sub("", raw.strip()))
    match = _JSON_OBJECT.search(text)
    if match:
        text = match.group(0)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StoryParseError(f"Story response is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("pages"), list):
        raise StoryParseError("Story response has no pages")

    pages = []
    for index, page in enumerate(data["pages"], start=1):
        if not isinstance(page, dict):
            continue
        number = page.get("pageNumber", index)
        try:
            number = int(number)
        except (TypeError, ValueError):
            number = index
        pages.append(StoryPageDraft(page_number=number, text=str(page.get("text", "")).strip()))

    if not pages:
        raise StoryParseError("Story response has no pages")

    return StoryText(title=str(data.get("title", "")).strip(), pages=pages)


class StoryWriter:
    """
    Write story text for a child profile using Gemini.

    Two flavours: a profile-only story, and a photo story where a family
    photo is attached and the story retells that moment as an adventure.
    """

    def __init__(self, client=None, model: Optional[str] = None):
        self.client = client or get_gemini_client()
        self.model = model or get_text_model()

    def _build_prompt(self, profile: ChildProfile) -> str:
        """Build the prompt for a profile-only story."""
        interests = ", ".join(profile.interest_labels)
        return f"""You are a world-renowned children's picture book author. Create a short story with {STORY_CONSTANTS["min_pages"]} to {STORY_CONSTANTS["max_pages"]} pages based on the following information. Choose the page count that best fits the story's natural flow.

Protagonist: {profile.child_name} ({profile.child_age} years old)
Interests: {interests}
Message to convey: "{profile.message_label}"

Writing rules:
1. Always use the protagonist's name "{profile.child_name}"
2. The interests ({interests}) should appear naturally in the story
3. Each page has only 1-2 sentences (picture book style)
4. Work the message "{profile.message_label}" naturally into the ending
5. Use simple words a {profile.child_age}-year-old can understand
6. Warm and positive atmosphere

Structure (scale to the page count): ~15% introduction, ~40% adventure, ~30% climax, ~15% conclusion that delivers the message.

IMPORTANT: Write the entire story in {profile.target_language}.

Return format (JSON only, no markdown):
{RETURN_FORMAT}"""

    def _build_photo_prompt(self, profile: ChildProfile, photo_description: str) -> str:
        """Build the prompt for a story based on an attached photo."""
        interests = ", ".join(profile.interest_labels)
        return f"""You are a world-renowned children's picture book author.
Using the attached photo and the information below, create a {STORY_CONSTANTS["min_pages"]} to {STORY_CONSTANTS["max_pages"]} page picture book for this child. Choose the page count that fits the story.

Photo description: "{photo_description}"
Child's name: {profile.child_name}
Age: {profile.child_age}
Interests: {interests}
Message: {profile.message_label}
Language: {profile.target_language}

Writing rules:
1. Retell the real moment in the photo as a fairy tale
2. {profile.child_name} is the main character
3. Turn the experience in the photo into a magical adventure
4. Each page has 1-3 short, rhythmic sentences
5. At least 40% of the text is dialogue
6. Use plenty of sound words and onomatopoeia
7. Weave the message in naturally
8. Write in {profile.target_language}

Structure (scale to the page count): ~15% opens on the photo scene, ~40% the adventure begins, ~30% climax, ~15% lesson and ending.

Return only this JSON (no markdown):
{RETURN_FORMAT}"""

    @llm_retry
    def _generate_text(self, contents: list, config: types.GenerateContentConfig) -> str:
        """Call the text model with retry for network errors."""
        response = self.client.models.generate_content(
            model=self.model,
            contents=contents,
            config=config,
        )
        return response.text or ""

    def write(self, profile: ChildProfile) -> StoryText:
        """
        Write a story for a child profile.

        Raises:
            StoryParseError: If the model output cannot be parsed
        """
        config = types.GenerateContentConfig(temperature=0.8, max_output_tokens=4096)
        raw = self._generate_text([self._build_prompt(profile)], config)
        story = parse_story_json(raw)
        logger.info(f"Story written: {story.title!r} ({story.page_count} pages)")
        return story

    def write_from_photo(
        self,
        profile: ChildProfile,
        photo: Optional[InlineImage] = None,
        photo_description: Optional[str] = None,
    ) -> StoryText:
        """
        Write a story that retells the moment in a family photo.

        The photo is attached only when both its data and mime type are set.

        Raises:
            StoryParseError: If the model output cannot be parsed
            ValueError: If the photo is not valid base64
        """
        contents: list = []
        if photo and photo.data and photo.mime_type:
            contents.append(types.Part.from_bytes(data=photo.to_bytes(), mime_type=photo.mime_type))

        description = photo_description or STORY_CONSTANTS["photo_default_description"]
        contents.append(self._build_photo_prompt(profile, description))

        config = types.GenerateContentConfig(
            temperature=0.8,
            top_k=40,
            top_p=0.95,
            max_output_tokens=8192,
        )
        raw = self._generate_text(contents, config)
        story = parse_story_json(raw)
        logger.info(f"Photo story written: {story.title!r} ({story.page_count} pages)")
        return story
