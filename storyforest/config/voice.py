"""
Voice configuration for Storyforest.

Narration and voice cloning use the ElevenLabs REST API.
"""

import os

from dotenv import load_dotenv

load_dotenv()

VOICE_CONSTANTS = {
    "base_url": "https://api.elevenlabs.io/v1",
    "model_id": "eleven_multilingual_v2",
    "default_description": "Storyforest user voice",
    "request_timeout": 120,
}

VOICE_SETTINGS = {
    "stability": 0.55,
    "similarity_boost": 0.8,
    "style": 0.2,
    "use_speaker_boost": True,
}

# Built-in narrators. "default" audio uses DEFAULT_VOICE_ID.
NARRATOR_VOICES = {
    "rachel": "21m00Tcm4TlvDq8ikWAM",
    "bella": "EXAVITQu4vr4xnSDxMaL",
    "adam": "pNInz6obpgDQGcFmaJgB",
    "antoni": "ErXwobaYiN019PkySvjV",
    "brian": "nPczCjzI2devNBz1zQrb",
    "nicole": "piTKgcLEGmPE4e6mEKli",
}

DEFAULT_VOICE_ID = os.getenv("ELEVENLABS_DEFAULT_VOICE_ID", NARRATOR_VOICES["brian"])
DEFAULT_VOICE_KEY = "default"


def get_elevenlabs_api_key() -> str:
    """Get the ElevenLabs API key from the environment ("" when unset)."""
    return os.getenv("ELEVENLABS_API_KEY", "")
