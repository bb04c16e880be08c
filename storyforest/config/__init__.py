"""
Configuration module for Storyforest.

Re-exports generation configuration for convenience.
"""

from .gemini import (
    GEMINI_CONSTANTS,
    GeminiNotConfiguredError,
    extract_image_from_response,
    get_gemini_api_key,
    get_gemini_client,
    get_image_config,
    get_image_model,
    get_inference_lm,
    get_proxy_model,
    get_text_model,
    image_retry,
    llm_retry,
)
from .story import (
    ART_STYLE_PROMPTS,
    STORY_CONSTANTS,
    get_art_style_prompt,
    get_interest_labels,
    get_message_label,
)
from .voice import DEFAULT_VOICE_ID, DEFAULT_VOICE_KEY, VOICE_CONSTANTS, VOICE_SETTINGS, get_elevenlabs_api_key

__all__ = [
    # Gemini
    "GEMINI_CONSTANTS",
    "GeminiNotConfiguredError",
    "extract_image_from_response",
    "get_gemini_api_key",
    "get_gemini_client",
    "get_image_config",
    "get_image_model",
    "get_inference_lm",
    "get_proxy_model",
    "get_text_model",
    "image_retry",
    "llm_retry",
    # Story
    "ART_STYLE_PROMPTS",
    "STORY_CONSTANTS",
    "get_art_style_prompt",
    "get_interest_labels",
    "get_message_label",
    # Voice
    "DEFAULT_VOICE_ID",
    "DEFAULT_VOICE_KEY",
    "VOICE_CONSTANTS",
    "VOICE_SETTINGS",
    "get_elevenlabs_api_key",
]
