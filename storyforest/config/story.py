"""
Story generation constants for Storyforest.

Maps the wizard's art style, interest and message ids onto the words
that go into prompts. Unknown ids pass through unchanged.
"""

from typing import Optional

STORY_CONSTANTS = {
    "min_pages": 10,
    "max_pages": 15,
    "default_language": "English",
    "photo_default_language": "Korean",
    "photo_default_description": "a special moment with family",
    "default_art_style": "watercolor",
}

ART_STYLE_PROMPTS = {
    "watercolor": "Soft watercolor with warm pastel tones and dreamy, gentle lighting",
    "cartoon": "Bright colorful cartoon style with bold outlines and cheerful expressions",
    "crayon": "Children's crayon drawing style with textured strokes and vivid colors",
    "digital": "Clean digital illustration with smooth gradients and modern aesthetic",
    "pencil": "Delicate pencil sketch with fine cross-hatching and soft shadows",
    "papercut": "Layered paper cut-out collage style with textured paper and depth",
}

INTEREST_LABELS = {
    "dinosaur": "dinosaurs",
    "car": "cars",
    "space": "outer space",
    "animal": "animals",
    "princess": "princesses",
    "superhero": "superheroes",
    "robot": "robots",
    "ocean": "the ocean",
    "fairy": "fairies",
    "dragon": "dragons",
    "train": "trains",
    "food": "food",
}

MESSAGE_LABELS = {
    "sleep": "Let's go to bed early tonight",
    "eat": "Let's not be picky eaters",
    "brave": "Be brave",
    "love": "I love you",
    "friend": "Get along with friends",
    "clean": "Tidy up after yourself",
    "share": "Let's share",
}

CUSTOM_MESSAGE_ID = "custom"


def get_art_style_prompt(style_id: Optional[str]) -> str:
    """Resolve an art style id; unknown or missing ids fall back to watercolor."""
    default = ART_STYLE_PROMPTS[STORY_CONSTANTS["default_art_style"]]
    return ART_STYLE_PROMPTS.get(style_id or "", default)


def get_interest_labels(interest_ids: Optional[list[str]]) -> list[str]:
    """Resolve interest ids to prompt labels."""
    return [INTEREST_LABELS.get(i, i) for i in interest_ids or []]


def get_message_label(message_id: Optional[str], custom_message: Optional[str] = None) -> str:
    """Resolve a message id; "custom" uses the caller-supplied text."""
    if message_id == CUSTOM_MESSAGE_ID:
        return custom_message or ""
    return MESSAGE_LABELS.get(message_id or "", message_id or "")
