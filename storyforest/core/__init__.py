"""Core generation logic for Storyforest."""

from .elevenlabs import ElevenLabsClient, ElevenLabsError, ElevenLabsNotConfiguredError
from .modules import Illustrator, StoryWriter, TextProxy, Translator
from .programs import StorybookGenerator
from .types import ChildProfile, GeneratedImage, GeneratedStory, InlineImage, StoryContext

__all__ = [
    "ElevenLabsClient",
    "ElevenLabsError",
    "ElevenLabsNotConfiguredError",
    "Illustrator",
    "StoryWriter",
    "TextProxy",
    "Translator",
    "StorybookGenerator",
    "ChildProfile",
    "GeneratedImage",
    "GeneratedStory",
    "InlineImage",
    "StoryContext",
]
