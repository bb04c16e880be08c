"""Generation modules for Storyforest."""

from .illustrator import Illustrator
from .story_writer import StoryParseError, StoryWriter, parse_story_json
from .text_proxy import EmptyResponseError, TextProxy, build_generate_config
from .translator import Translator

__all__ = [
    "Illustrator",
    "StoryParseError",
    "StoryWriter",
    "parse_story_json",
    "EmptyResponseError",
    "TextProxy",
    "build_generate_config",
    "Translator",
]
