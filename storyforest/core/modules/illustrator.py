"""
Module for generating picture book illustrations with Gemini image models.

Each call frames the model as a storyboard artist, passes the art style,
optional story context and optional reference images, and returns the
first image part of the response.
"""

import logging
from typing import Optional

from ...config import (
    GEMINI_CONSTANTS,
    extract_image_from_response,
    get_gemini_client,
    get_image_config,
    get_image_model,
    image_retry,
)
from ...config.story import ART_STYLE_PROMPTS
from ..types import ChildProfile, GeneratedImage, InlineImage, StoryContext, get_aspect_ratio

logger = logging.getLogger(__name__)

DEFAULT_STYLE = ART_STYLE_PROMPTS["watercolor"]


class Illustrator:
    """
    Generate illustrations for story pages.

    Reference images (e.g. the protagonist or a previous page) are sent
    alongside the scene prompt in a single multimodal call.
    """

    def __init__(self, client=None, model: Optional[str] = None):
        self.client = client or get_gemini_client()
        self.model = model or get_image_model()
        self.config = get_image_config()

    def build_scene_prompt(
        self,
        scene: str,
        style: Optional[str] = None,
        aspect_ratio: Optional[str] = None,
        context: Optional[StoryContext] = None,
    ) -> str:
        """Build the text part of an illustration request."""
        ratio = get_aspect_ratio(aspect_ratio)
        context_block = f"\n{context.to_prompt_string()}\n" if context else ""

        return f"""You are a film director creating a storyboard frame for a children's picture book.

Art style: {style or DEFAULT_STYLE}.
{context_block}
CURRENT SCENE: "{scene}"

INSTRUCTIONS:
1. Create a beautiful, high-quality children's book illustration in {ratio.label} aspect ratio ({ratio.size})
2. Use vibrant colors and engaging compositions
3. Make characters expressive and appealing to children
4. Ensure the image is suitable for a picture book
5. Do NOT include any text in the image
6. The image MUST be in {ratio.orientation} orientation with {ratio.label} aspect ratio

Generate an illustration that captures this scene perfectly."""

    def build_page_scene(self, page_text: str, profile: ChildProfile) -> str:
        """Describe a story page as a scene for the illustration prompt."""
        return f"""Children's picture book illustration, {profile.style_prompt}:
Scene: {page_text}
Main character: {profile.child_name}, a {profile.child_age}-year-old child
Elements: {", ".join(profile.interest_labels)}
Style: Warm, inviting, child-friendly, full page illustration with no text"""

    def _build_contents(self, prompt: str, reference_images: Optional[list[InlineImage]]) -> list:
        """Assemble the prompt followed by any reference images."""
        contents: list = [prompt]
        max_refs = GEMINI_CONSTANTS["max_reference_images"]

        for image in (reference_images or [])[:max_refs]:
            if not image.data or not image.mime_type:
                continue
            contents.append(image.to_pil_image())
            if image.label:
                contents.append(f"Reference image: {image.label}")

        return contents

    @image_retry
    def _generate_image(self, contents: list) -> GeneratedImage:
        """Generate image from multimodal contents with retry for overload and rate limits."""
        response = self.client.models.generate_content(
            model=self.model,
            contents=contents,
            config=self.config,
        )
        mime_type, data = extract_image_from_response(response)
        return GeneratedImage(mime_type=mime_type, data=data)

    def illustrate(
        self,
        scene: str,
        style: Optional[str] = None,
        reference_images: Optional[list[InlineImage]] = None,
        aspect_ratio: Optional[str] = None,
        context: Optional[StoryContext] = None,
    ) -> GeneratedImage:
        """
        Generate a single illustration.

        Args:
            scene: What to draw
            style: Art style description (defaults to watercolor)
            reference_images: Optional images to keep characters consistent
            aspect_ratio: "16:9" (default), "3:4" or "1:1"
            context: Optional story context for continuity

        Returns:
            GeneratedImage with mime type and bytes
        """
        prompt = self.build_scene_prompt(scene, style, aspect_ratio, context)
        contents = self._build_contents(prompt, reference_images)
        logger.debug(f"Illustrating scene ({len(contents) - 1} reference parts): {scene[:80]}")
        return self._generate_image(contents)

    def illustrate_page(self, page_text: str, profile: ChildProfile) -> GeneratedImage:
        """Illustrate one page of a generated story."""
        scene = self.build_page_scene(page_text, profile)
        return self.illustrate(scene, style=profile.style_prompt)
