"""Voice service: cloning, narration, saved voices and voice registration."""

import base64
import binascii
import logging
from typing import Callable, Optional

from arq import ArqRedis

from ...config.voice import DEFAULT_VOICE_ID
from ...core.elevenlabs import ElevenLabsClient, ElevenLabsError, ElevenLabsNotConfiguredError
from ...core.types import parse_data_url
from ..arq_pool import enqueue_audio_job, get_pool
from ..config import TEMP_VOICE_SAMPLES_PREFIX
from ..database.repository import UserRepository, VoiceRepository
from ..database.storage import BlobStorage
from ..errors import (
    CallableError,
    failed_precondition,
    internal,
    invalid_argument,
    not_found,
    permission_denied,
    wrap_internal,
)
from ..models.documents import SavedVoice, UserSettings
from ..models.enums import GenerationStatus

logger = logging.getLogger(__name__)


def _provider_error(e: Exception, action: str) -> CallableError:
    """Map ElevenLabs failures onto callable errors."""
    if isinstance(e, ElevenLabsNotConfiguredError):
        return failed_precondition(str(e))
    if isinstance(e, ElevenLabsError):
        return internal(e.message)
    logger.error(f"{action} failed: {type(e).__name__}: {e}")
    return internal(f"{action} failed: {e}")


class VoiceService:
    """
    Service for ElevenLabs voice operations and the user's voice settings.

    Args:
        elevenlabs: ElevenLabs client
        storage: Blob storage holding uploaded voice samples
        users: User repository
        voices: Saved voice repository
        get_queue: Returns the ARQ pool used to enqueue narration jobs
    """

    def __init__(
        self,
        elevenlabs: ElevenLabsClient,
        storage: BlobStorage,
        users: UserRepository,
        voices: VoiceRepository,
        get_queue: Callable[[], ArqRedis] = get_pool,
    ):
        self.elevenlabs = elevenlabs
        self.storage = storage
        self.users = users
        self.voices = voices
        self.get_queue = get_queue

    async def add_voice(self, name: Optional[str], audio_base64: Optional[str], description: Optional[str] = None) -> str:
        """Clone a voice from a base64 sample and return its id."""
        if not name or not audio_base64:
            raise invalid_argument("Missing required fields: name, audioBase64")
        if not self.elevenlabs.is_configured:
            raise failed_precondition("ElevenLabs API key not configured")

        try:
            audio = base64.b64decode(parse_data_url(audio_base64)[1], validate=True)
        except (binascii.Error, ValueError) as e:
            raise invalid_argument("audioBase64 is not valid base64") from e

        try:
            return await self.elevenlabs.add_voice(name, audio, description)
        except Exception as e:
            raise _provider_error(e, "Voice cloning") from e

    async def generate_speech(self, text: Optional[str], voice_id: Optional[str] = None) -> str:
        """Narrate text and return base64 MP3. No voice id uses the default narrator."""
        if not text:
            raise invalid_argument("Missing text")
        if not self.elevenlabs.is_configured:
            raise failed_precondition("ElevenLabs API key not configured")

        try:
            audio = await self.elevenlabs.generate_speech(text, voice_id or DEFAULT_VOICE_ID)
        except Exception as e:
            raise _provider_error(e, "Speech generation") from e
        return base64.b64encode(audio).decode()

    async def delete_voice(self, voice_id: Optional[str]) -> None:
        if not voice_id:
            raise invalid_argument("Missing voiceId")
        if not self.elevenlabs.is_configured:
            raise failed_precondition("ElevenLabs API key not configured")

        try:
            await self.elevenlabs.delete_voice(voice_id)
        except Exception as e:
            raise _provider_error(e, "Voice deletion") from e

    async def register_voice(self, user_id: str, storage_path: Optional[str], name: Optional[str]) -> str:
        """
        Clone the caller's uploaded sample and start narrating the library.

        Returns:
            The new voice id
        """
        if not storage_path or not name:
            raise invalid_argument("Missing required fields: storagePath, name")
        if not storage_path.startswith(f"{TEMP_VOICE_SAMPLES_PREFIX}/{user_id}/"):
            raise permission_denied("Voice sample does not belong to the caller")
        if not self.elevenlabs.is_configured:
            raise failed_precondition("ElevenLabs API key not configured")

        logger.info(f"Registering voice for user {user_id} from {storage_path}")
        try:
            sample = await self.storage.download(storage_path)
        except Exception as e:
            raise wrap_internal(e, "Voice sample download") from e
        if sample is None:
            raise not_found("Audio sample file not found in storage")

        try:
            voice_id = await self.elevenlabs.add_voice(name, sample)
        except Exception as e:
            raise _provider_error(e, "Voice cloning") from e

        try:
            await self.users.start_voice_generation(user_id, voice_id)
        except Exception as e:
            raise wrap_internal(e, "Voice registration") from e

        try:
            await enqueue_audio_job(self.get_queue(), user_id, voice_id)
        except Exception as e:
            logger.error(f"Failed to enqueue audio generation for {user_id}: {e}")
            raise internal("Failed to trigger background generation") from e

        try:
            await self.storage.delete(storage_path)
        except Exception as e:
            logger.warning(f"Failed to clean up voice sample {storage_path}: {e}")

        return voice_id

    async def get_status(self, user_id: str) -> tuple[GenerationStatus, bool]:
        """The user's narration job status and whether a cloned voice is live."""
        user = await self.users.get_user(user_id)
        if user is None:
            return GenerationStatus.IDLE, False
        return GenerationStatus(user.generation_status), bool(user.elevenlabs_voice_id)

    # =========================================================================
    # Saved voices
    # =========================================================================

    async def list_saved_voices(self, user_id: str) -> list[SavedVoice]:
        return await self.voices.list_voices(user_id)

    async def save_voice(
        self,
        user_id: str,
        voice_id: str,
        name: str,
        sample_storage_path: Optional[str] = None,
    ) -> SavedVoice:
        voice = SavedVoice(id=voice_id, name=name, user_id=user_id, sample_storage_path=sample_storage_path)
        await self.voices.save_voice(voice)
        return voice

    async def delete_saved_voice(self, user_id: str, voice_id: str) -> None:
        """Delete a saved voice: the provider copy (best effort), then the document."""
        voice = await self.voices.get_voice(voice_id)
        if voice is None:
            raise not_found(f"Voice {voice_id} not found")
        if voice.user_id != user_id:
            raise permission_denied("Voice belongs to another user")

        if self.elevenlabs.is_configured:
            try:
                await self.elevenlabs.delete_voice(voice_id)
            except Exception as e:
                logger.warning(f"Provider delete failed for voice {voice_id}: {e}")

        await self.voices.delete_voice(voice_id)

        settings = await self.users.get_settings(user_id)
        if settings.selected_voice_id == voice_id:
            await self.users.save_settings(user_id, UserSettings(selected_voice_id=None))

    async def get_selected_voice(self, user_id: str) -> Optional[str]:
        settings = await self.users.get_settings(user_id)
        return settings.selected_voice_id

    async def select_voice(self, user_id: str, voice_id: Optional[str]) -> None:
        """Select a saved voice, or the default narrator when voice_id is None."""
        if voice_id is not None:
            voice = await self.voices.get_voice(voice_id)
            if voice is None or voice.user_id != user_id:
                raise not_found(f"Voice {voice_id} not found")
        await self.users.save_settings(user_id, UserSettings(selected_voice_id=voice_id))
