"""
Program for generating a complete personalised storybook.

Workflow:
1. Write the story text from the child's profile (optionally from a photo)
2. Illustrate each page, one at a time

A page whose illustration fails keeps its text with no image; the rest
of the book is still illustrated.
"""

import logging
from typing import Callable, Optional

from ..modules.illustrator import Illustrator
from ..modules.story_writer import StoryWriter
from ..types import ChildProfile, GeneratedPage, GeneratedStory, InlineImage, StoryText

logger = logging.getLogger(__name__)

# (stage, detail, completed, total)
ProgressCallback = Callable[[str, str, int, int], None]


class StorybookGenerator:
    """
    Complete storybook pipeline: story text first, then illustrations.

    Args:
        writer: Optional StoryWriter (created on demand)
        illustrator: Optional Illustrator (created on demand)
    """

    def __init__(
        self,
        writer: Optional[StoryWriter] = None,
        illustrator: Optional[Illustrator] = None,
    ):
        self.writer = writer or StoryWriter()
        self.illustrator = illustrator or Illustrator()

    def generate(
        self,
        profile: ChildProfile,
        on_progress: Optional[ProgressCallback] = None,
    ) -> GeneratedStory:
        """Generate an illustrated story from the child's profile."""
        story = self.writer.write(profile)
        return self._illustrate(story, profile, on_progress)

    def generate_from_photo(
        self,
        profile: ChildProfile,
        photo: Optional[InlineImage] = None,
        photo_description: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> GeneratedStory:
        """Generate an illustrated story that retells a family photo."""
        story = self.writer.write_from_photo(profile, photo, photo_description)
        return self._illustrate(story, profile, on_progress)

    def _illustrate(
        self,
        story: StoryText,
        profile: ChildProfile,
        on_progress: Optional[ProgressCallback],
    ) -> GeneratedStory:
        """Illustrate pages sequentially; failures leave image_url as None."""
        total = story.page_count
        pages: list[GeneratedPage] = []

        if on_progress:
            on_progress("text", f"Story written: {story.title}", 0, total)

        for index, draft in enumerate(story.pages, start=1):
            image_url = None
            try:
                image = self.illustrator.illustrate_page(draft.text, profile)
                image_url = image.to_data_url()
            except Exception as e:
                logger.error(f"Image generation failed for page {index}/{total}: {type(e).__name__}: {e}")

            pages.append(GeneratedPage(page_number=draft.page_number, text=draft.text, image_url=image_url))

            if on_progress:
                on_progress("images", f"Illustrated page {index} of {total}", index, total)

        result = GeneratedStory(title=story.title, style=profile.style_prompt, pages=pages)
        logger.info(f"Storybook complete: {result.illustrated_count}/{total} pages illustrated")
        return result
