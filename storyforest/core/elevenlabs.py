"""ElevenLabs REST client for voice cloning and narration."""

import logging
from typing import Optional

import httpx

from ..config.voice import VOICE_CONSTANTS, VOICE_SETTINGS, get_elevenlabs_api_key

logger = logging.getLogger(__name__)


class ElevenLabsNotConfiguredError(RuntimeError):
    """Raised when no ElevenLabs API key is available."""


class ElevenLabsError(Exception):
    """A non-2xx response from ElevenLabs."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_detail(response: httpx.Response, fallback: str) -> str:
    """Pull detail.message out of an ElevenLabs error body when present."""
    try:
        body = response.json()
    except ValueError:
        return fallback

    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, dict) and detail.get("message"):
        return detail["message"]
    if isinstance(detail, str) and detail:
        return detail
    return fallback


class ElevenLabsClient:
    """
    Thin async wrapper over the ElevenLabs endpoints the app uses.

    Args:
        api_key: API key (defaults to ELEVENLABS_API_KEY)
        base_url: API root
        transport: Optional httpx transport, used by tests
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = VOICE_CONSTANTS["base_url"],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else get_elevenlabs_api_key()
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _client(self) -> httpx.AsyncClient:
        if not self.api_key:
            raise ElevenLabsNotConfiguredError("ElevenLabs API key not configured")
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"xi-api-key": self.api_key},
            timeout=VOICE_CONSTANTS["request_timeout"],
            transport=self.transport,
        )

    async def add_voice(
        self,
        name: str,
        audio: bytes,
        description: Optional[str] = None,
        filename: str = "sample.mp3",
    ) -> str:
        """
        Clone a voice from a single audio sample.

        Returns:
            The new voice id

        Raises:
            ElevenLabsError: If ElevenLabs rejects the request
        """
        async with self._client() as client:
            response = await client.post(
                "/voices/add",
                data={"name": name, "description": description or VOICE_CONSTANTS["default_description"]},
                files={"files": (filename, audio, "audio/mpeg")},
            )

        if response.status_code >= 400:
            raise ElevenLabsError(
                _error_detail(response, f"Voice cloning failed ({response.status_code})"),
                status_code=response.status_code,
            )

        voice_id = response.json().get("voice_id")
        if not voice_id:
            raise ElevenLabsError("Voice cloning returned no voice_id", status_code=response.status_code)

        logger.info(f"Created ElevenLabs voice {voice_id} ({name})")
        return voice_id

    async def generate_speech(self, text: str, voice_id: str) -> bytes:
        """Synthesize text as MP3 bytes."""
        async with self._client() as client:
            response = await client.post(
                f"/text-to-speech/{voice_id}",
                json={
                    "text": text,
                    "model_id": VOICE_CONSTANTS["model_id"],
                    "voice_settings": VOICE_SETTINGS,
                },
                headers={"Accept": "audio/mpeg"},
            )

        if response.status_code >= 400:
            raise ElevenLabsError(
                _error_detail(response, f"Speech generation failed ({response.status_code})"),
                status_code=response.status_code,
            )
        return response.content

    async def delete_voice(self, voice_id: str) -> bool:
        """
        Delete a cloned voice. A non-2xx response is logged, not raised,
        because the voice may already be gone.

        Returns:
            True if ElevenLabs confirmed the delete
        """
        async with self._client() as client:
            response = await client.delete(f"/voices/{voice_id}")

        if response.status_code >= 400:
            logger.warning(f"Failed to delete ElevenLabs voice {voice_id}: HTTP {response.status_code}")
            return False

        logger.info(f"Deleted ElevenLabs voice {voice_id}")
        return True
