"""
Raw Gemini text generation for client-side prompts.

The client sends a prompt and optional generation/safety settings in the
Gemini REST shape (camelCase keys); this module turns them into a
google-genai config so the API key stays on the server.
"""

import logging
from typing import Optional

from google.genai import types

from ...config import get_gemini_client, get_proxy_model, llm_retry
from ...config.gemini import DEFAULT_PROXY_GENERATION_CONFIG, DEFAULT_SAFETY_SETTINGS

logger = logging.getLogger(__name__)

# Gemini REST generationConfig keys -> google-genai field names
GENERATION_CONFIG_FIELDS = {
    "temperature": "temperature",
    "topK": "top_k",
    "topP": "top_p",
    "maxOutputTokens": "max_output_tokens",
}


class EmptyResponseError(ValueError):
    """Raised when Gemini returns no text."""


def build_generate_config(
    generation_config: Optional[dict] = None,
    safety_settings: Optional[list[dict]] = None,
) -> types.GenerateContentConfig:
    """Build a GenerateContentConfig, applying defaults for omitted settings."""
    source = generation_config or DEFAULT_PROXY_GENERATION_CONFIG
    kwargs = {
        GENERATION_CONFIG_FIELDS[key]: value
        for key, value in source.items()
        if key in GENERATION_CONFIG_FIELDS and value is not None
    }

    settings = safety_settings or DEFAULT_SAFETY_SETTINGS
    kwargs["safety_settings"] = [
        types.SafetySetting(category=s["category"], threshold=s["threshold"])
        for s in settings
    ]
    return types.GenerateContentConfig(**kwargs)


class TextProxy:
    """Forward a prompt to Gemini and return the raw text."""

    def __init__(self, client=None, model: Optional[str] = None):
        self.client = client or get_gemini_client()
        self.model = model or get_proxy_model()

    @llm_retry
    def generate(
        self,
        prompt: str,
        generation_config: Optional[dict] = None,
        safety_settings: Optional[list[dict]] = None,
    ) -> str:
        """
        Generate text for a prompt.

        Raises:
            EmptyResponseError: If the response has no text
        """
        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=build_generate_config(generation_config, safety_settings),
        )
        text = response.text
        if not text:
            raise EmptyResponseError("No text in Gemini response")
        return text
