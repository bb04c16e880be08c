"""Generation service: story text, illustrations, translation and the raw text proxy.

Blocking SDK calls run in worker threads. Argument checks come first,
then the API key check, then the call; anything unexpected is reported
as an internal error.
"""

import asyncio
import logging
from typing import Optional

from ...config import STORY_CONSTANTS, GeminiNotConfiguredError, get_gemini_api_key, get_gemini_client
from ...core.modules import EmptyResponseError, Illustrator, StoryWriter, TextProxy, Translator
from ...core.programs import StorybookGenerator
from ...core.types import ChildProfile, GeneratedStory, InlineImage, StoryContext, parse_data_url
from ..errors import failed_precondition, invalid_argument, internal, wrap_internal
from ..models.requests import GenerateImageRequest, PhotoStoryVariables, StoryVariables

logger = logging.getLogger(__name__)


def build_profile(variables: StoryVariables, default_language: str) -> ChildProfile:
    """Turn wizard input into a ChildProfile, rejecting a missing name or age."""
    if not variables.child_name or not variables.child_age:
        raise invalid_argument("Missing required fields: childName, childAge")

    return ChildProfile(
        child_name=variables.child_name,
        child_age=variables.child_age,
        interests=variables.interests,
        message=variables.message,
        custom_message=variables.custom_message,
        target_language=variables.target_language or default_language,
        art_style=variables.art_style,
    )


class GenerationService:
    """
    Service wrapping the generation core for the API.

    Args:
        client: Optional google-genai client (created on first use)
        translator: Optional Translator module
    """

    def __init__(self, client=None, translator: Optional[Translator] = None):
        self._client = client
        self._translator = translator

    def _gemini_client(self):
        if self._client is None:
            try:
                self._client = get_gemini_client()
            except GeminiNotConfiguredError as e:
                raise failed_precondition(str(e)) from e
        return self._client

    async def generate_story(self, variables: StoryVariables) -> GeneratedStory:
        """Write and illustrate a story from the wizard's answers."""
        profile = build_profile(variables, STORY_CONSTANTS["default_language"])
        client = self._gemini_client()
        generator = StorybookGenerator(StoryWriter(client), Illustrator(client))

        logger.info(f"Generating story for {profile.child_name} ({profile.target_language})")
        try:
            return await asyncio.to_thread(generator.generate, profile)
        except Exception as e:
            raise wrap_internal(e, "Story generation") from e

    async def generate_photo_story(self, variables: PhotoStoryVariables) -> GeneratedStory:
        """Write and illustrate a story that retells a family photo."""
        profile = build_profile(variables, STORY_CONSTANTS["photo_default_language"])
        client = self._gemini_client()
        generator = StorybookGenerator(StoryWriter(client), Illustrator(client))

        photo = None
        if variables.photo_base64 and variables.photo_mime_type:
            _, data = parse_data_url(variables.photo_base64)
            photo = InlineImage(mime_type=variables.photo_mime_type, data=data)

        logger.info(f"Generating photo story for {profile.child_name} (photo attached: {photo is not None})")
        try:
            return await asyncio.to_thread(
                generator.generate_from_photo,
                profile,
                photo,
                variables.photo_description,
            )
        except Exception as e:
            raise wrap_internal(e, "Photo story generation") from e

    async def translate(self, text: Optional[str], target_language: Optional[str]) -> str:
        """Translate text, returning the stripped result."""
        if not text or not target_language:
            raise invalid_argument("Missing text or targetLanguage")
        if not get_gemini_api_key():
            raise failed_precondition("Gemini API key not configured")

        translator = self._translator or Translator()
        try:
            return await asyncio.to_thread(translator, text=text, target_language=target_language)
        except Exception as e:
            raise wrap_internal(e, "Translation") from e

    async def generate_image(self, request: GenerateImageRequest) -> str:
        """Illustrate a scene and return it as a data URL."""
        if not request.prompt:
            raise invalid_argument("Missing prompt")
        client = self._gemini_client()

        references = [
            InlineImage(mime_type=ref.mime_type, data=parse_data_url(ref.data)[1], label=ref.label)
            for ref in request.reference_images
            if ref.data and ref.mime_type
        ]
        context = None
        if request.context:
            context = StoryContext(
                title=request.context.title,
                page_number=request.context.page_number,
                total_pages=request.context.total_pages,
                previous_texts=request.context.previous_texts,
                character_name=request.context.character_name,
            )

        illustrator = Illustrator(client)
        try:
            image = await asyncio.to_thread(
                illustrator.illustrate,
                request.prompt,
                request.style,
                references,
                request.aspect_ratio,
                context,
            )
        except Exception as e:
            raise wrap_internal(e, "Image generation") from e

        return image.to_data_url()

    async def gemini_generate(
        self,
        prompt: Optional[str],
        generation_config: Optional[dict] = None,
        safety_settings: Optional[list[dict]] = None,
    ) -> str:
        """Forward a raw prompt to Gemini and return its text."""
        if not prompt:
            raise invalid_argument("Missing prompt")
        proxy = TextProxy(self._gemini_client())

        try:
            return await asyncio.to_thread(proxy.generate, prompt, generation_config, safety_settings)
        except EmptyResponseError as e:
            raise internal("No text in Gemini response") from e
        except Exception as e:
            raise wrap_internal(e, "Gemini API call") from e
