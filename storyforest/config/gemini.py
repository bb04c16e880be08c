"""
Gemini configuration for Storyforest.

Story text and illustrations come from Gemini through google-genai.
Translations go through DSPy (LiteLLM) against the same API key.

Includes:
- Retry with fixed backoff for overloaded / rate-limited image calls
- Retry with exponential backoff for transient network errors on text calls
"""

import base64
import logging
import os

import dspy
from dotenv import load_dotenv
from google import genai
from google.genai import types
from google.genai.errors import ClientError, ServerError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_chain,
    wait_exponential,
    wait_fixed,
)

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

GEMINI_CONSTANTS = {
    "text_model": "gemini-2.0-flash",
    "proxy_model": "gemini-3.0-flash",
    "image_model": "gemini-3-pro-image-preview",
    "max_reference_images": 14,
}

# Timeout for LLM calls (seconds)
LLM_TIMEOUT = 120

# Network errors that should trigger retry
NETWORK_EXCEPTIONS = (
    ConnectionError,
    TimeoutError,
    BrokenPipeError,
    OSError,  # Catches [Errno 32] Broken pipe
)

RETRYABLE_EXCEPTIONS = (ServerError,) + NETWORK_EXCEPTIONS

# Default safety settings for the raw text proxy
DEFAULT_SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]

DEFAULT_PROXY_GENERATION_CONFIG = {
    "temperature": 0.7,
    "maxOutputTokens": 2048,
}


class GeminiNotConfiguredError(RuntimeError):
    """Raised when no Gemini API key is available."""


def get_gemini_api_key() -> str:
    """Return the Gemini API key (GEMINI_API_KEY, falling back to GOOGLE_API_KEY)."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""


def get_gemini_client() -> genai.Client:
    """
    Get a google-genai client for text and image generation.

    Raises:
        GeminiNotConfiguredError: If no API key is set
    """
    api_key = get_gemini_api_key()
    if not api_key:
        raise GeminiNotConfiguredError("Gemini API key not configured")

    return genai.Client(api_key=api_key)


def get_text_model() -> str:
    """Get the model ID used for story writing."""
    return os.getenv("GEMINI_TEXT_MODEL", GEMINI_CONSTANTS["text_model"])


def get_proxy_model() -> str:
    """Get the model ID used by the raw text proxy."""
    return os.getenv("GEMINI_PROXY_MODEL", GEMINI_CONSTANTS["proxy_model"])


def get_image_model() -> str:
    """Get the image model ID."""
    return os.getenv("GEMINI_IMAGE_MODEL", GEMINI_CONSTANTS["image_model"])


def get_image_config() -> types.GenerateContentConfig:
    """Get the default config for image generation."""
    return types.GenerateContentConfig(
        temperature=1.0,
        top_k=64,
        top_p=0.98,
        response_modalities=[types.Modality.TEXT, types.Modality.IMAGE],
    )


def get_inference_lm() -> dspy.LM:
    """
    Get the DSPy LM used for translation.

    Raises:
        GeminiNotConfiguredError: If no API key is set
    """
    api_key = get_gemini_api_key()
    if not api_key:
        raise GeminiNotConfiguredError("Gemini API key not configured")

    return dspy.LM(
        f"gemini/{get_text_model()}",
        api_key=api_key,
        max_tokens=1024,
        temperature=0.3,
        timeout=LLM_TIMEOUT,
    )


def extract_image_from_response(response) -> tuple[str, bytes]:
    """
    Extract the first image part from a Gemini API response.

    Args:
        response: The response from genai.Client.models.generate_content()

    Returns:
        (mime_type, image bytes)

    Raises:
        ValueError: If no image found in response
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates or not candidates[0].content:
        raise ValueError("No image found in response")

    for part in candidates[0].content.parts or []:
        inline = getattr(part, "inline_data", None)
        if inline and inline.mime_type and inline.mime_type.startswith("image/"):
            data = inline.data
            return inline.mime_type, base64.b64decode(data) if isinstance(data, str) else data

    raise ValueError("No image found in response")


def _is_retryable_image_error(exc: BaseException) -> bool:
    """Server errors, rate limits and network errors are retried; other 4xx are not."""
    if isinstance(exc, ClientError):
        return exc.code == 429
    return isinstance(exc, RETRYABLE_EXCEPTIONS)


# Retry decorator for image calls: 3 attempts, waiting 3s then 8s
image_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_chain(wait_fixed(3), wait_fixed(8)),
    retry=retry_if_exception(_is_retryable_image_error),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)

# Retry decorator for text calls with network errors
llm_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=2, min=2, max=10),
    retry=retry_if_exception_type(NETWORK_EXCEPTIONS),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
