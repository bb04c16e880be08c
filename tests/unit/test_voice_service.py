"""Tests for VoiceService."""

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest

from storyforest.api.arq_pool import AUDIO_JOB_NAME
from storyforest.api.database.repository import UserRepository, VoiceRepository
from storyforest.api.database.storage import BlobStorage
from storyforest.api.errors import CallableError
from storyforest.api.models.documents import SavedVoice, UserProfile, UserSettings
from storyforest.api.models.enums import GenerationStatus
from storyforest.api.services.voice_service import VoiceService
from storyforest.config.voice import DEFAULT_VOICE_ID
from storyforest.core.elevenlabs import ElevenLabsClient, ElevenLabsError

SAMPLE_PATH = "temp_voice_samples/user-123/sample.mp3"


@pytest.fixture
def elevenlabs():
    client = AsyncMock(spec=ElevenLabsClient)
    client.is_configured = True
    client.add_voice.return_value = "voice-abc"
    client.generate_speech.return_value = b"ID3audio"
    return client


@pytest.fixture
def storage():
    store = AsyncMock(spec=BlobStorage)
    store.download.return_value = b"sample-bytes"
    return store


@pytest.fixture
def users():
    repo = AsyncMock(spec=UserRepository)
    repo.get_settings.return_value = UserSettings()
    return repo


@pytest.fixture
def voices():
    return AsyncMock(spec=VoiceRepository)


@pytest.fixture
def queue():
    return AsyncMock()


@pytest.fixture
def service(elevenlabs, storage, users, voices, queue):
    return VoiceService(elevenlabs, storage, users, voices, get_queue=MagicMock(return_value=queue))


async def _code(awaitable) -> str:
    with pytest.raises(CallableError) as exc:
        await awaitable
    return exc.value.code


class TestProviderCalls:
    @pytest.mark.asyncio
    async def test_add_voice_decodes_sample(self, service, elevenlabs):
        audio = base64.b64encode(b"sample").decode()

        voice_id = await service.add_voice("Mom", f"data:audio/mpeg;base64,{audio}", "warm")

        assert voice_id == "voice-abc"
        elevenlabs.add_voice.assert_awaited_once_with("Mom", b"sample", "warm")

    @pytest.mark.asyncio
    async def test_add_voice_missing_fields(self, service):
        assert await _code(service.add_voice("Mom", None)) == "invalid-argument"
        assert await _code(service.add_voice("", "AAAA")) == "invalid-argument"

    @pytest.mark.asyncio
    async def test_add_voice_without_key(self, service, elevenlabs):
        elevenlabs.is_configured = False

        assert await _code(service.add_voice("Mom", "AAAA")) == "failed-precondition"

    @pytest.mark.asyncio
    async def test_provider_message_surfaced(self, service, elevenlabs):
        elevenlabs.add_voice.side_effect = ElevenLabsError("Sample too short", status_code=400)

        with pytest.raises(CallableError) as exc:
            await service.add_voice("Mom", "AAAA")

        assert exc.value.code == "internal"
        assert exc.value.message == "Sample too short"

    @pytest.mark.asyncio
    async def test_speech_defaults_to_narrator(self, service, elevenlabs):
        audio = await service.generate_speech("Hello")

        assert base64.b64decode(audio) == b"ID3audio"
        elevenlabs.generate_speech.assert_awaited_once_with("Hello", DEFAULT_VOICE_ID)

    @pytest.mark.asyncio
    async def test_speech_requires_text(self, service):
        assert await _code(service.generate_speech("")) == "invalid-argument"


class TestRegisterVoice:
    @pytest.mark.asyncio
    async def test_clones_and_enqueues(self, service, elevenlabs, storage, users, queue):
        voice_id = await service.register_voice("user-123", SAMPLE_PATH, "Mom")

        assert voice_id == "voice-abc"
        storage.download.assert_awaited_once_with(SAMPLE_PATH)
        elevenlabs.add_voice.assert_awaited_once_with("Mom", b"sample-bytes")
        users.start_voice_generation.assert_awaited_once_with("user-123", "voice-abc")
        queue.enqueue_job.assert_awaited_once_with(AUDIO_JOB_NAME, user_id="user-123", voice_id="voice-abc")
        storage.delete.assert_awaited_once_with(SAMPLE_PATH)

    @pytest.mark.asyncio
    async def test_rejects_other_users_sample(self, service, storage):
        code = await _code(service.register_voice("user-123", "temp_voice_samples/other/sample.mp3", "Mom"))

        assert code == "permission-denied"
        storage.download.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_sample(self, service, storage, elevenlabs):
        storage.download.return_value = None

        assert await _code(service.register_voice("user-123", SAMPLE_PATH, "Mom")) == "not-found"
        elevenlabs.add_voice.assert_not_called()

    @pytest.mark.asyncio
    async def test_profile_write_failure_is_internal(self, service, users, queue):
        users.start_voice_generation.side_effect = RuntimeError("firestore unavailable")

        with pytest.raises(CallableError) as exc:
            await service.register_voice("user-123", SAMPLE_PATH, "Mom")

        assert exc.value.code == "internal"
        assert "Voice registration failed" in exc.value.message
        queue.enqueue_job.assert_not_called()

    @pytest.mark.asyncio
    async def test_storage_error_is_internal(self, service, storage, elevenlabs):
        storage.download.side_effect = OSError("bucket unreachable")

        assert await _code(service.register_voice("user-123", SAMPLE_PATH, "Mom")) == "internal"
        elevenlabs.add_voice.assert_not_called()

    @pytest.mark.asyncio
    async def test_enqueue_failure_is_internal(self, service, queue):
        queue.enqueue_job.side_effect = ConnectionError("redis down")

        with pytest.raises(CallableError) as exc:
            await service.register_voice("user-123", SAMPLE_PATH, "Mom")

        assert exc.value.code == "internal"
        assert exc.value.message == "Failed to trigger background generation"

    @pytest.mark.asyncio
    async def test_sample_cleanup_failure_ignored(self, service, storage):
        storage.delete.side_effect = RuntimeError("bucket unavailable")

        assert await service.register_voice("user-123", SAMPLE_PATH, "Mom") == "voice-abc"

    @pytest.mark.asyncio
    async def test_status_for_unknown_user(self, service, users):
        users.get_user.return_value = None

        assert await service.get_status("user-123") == (GenerationStatus.IDLE, False)

    @pytest.mark.asyncio
    async def test_status(self, service, users):
        users.get_user.return_value = UserProfile(
            uid="user-123", generation_status="processing", elevenlabs_voice_id="voice-abc"
        )

        assert await service.get_status("user-123") == (GenerationStatus.PROCESSING, True)


class TestSavedVoices:
    @pytest.mark.asyncio
    async def test_delete_clears_selection(self, service, voices, users, elevenlabs):
        voices.get_voice.return_value = SavedVoice(id="v1", name="Mom", user_id="user-123")
        users.get_settings.return_value = UserSettings(selected_voice_id="v1")
        elevenlabs.delete_voice.side_effect = RuntimeError("gone")

        await service.delete_saved_voice("user-123", "v1")

        voices.delete_voice.assert_awaited_once_with("v1")
        users.save_settings.assert_awaited_once_with("user-123", UserSettings(selected_voice_id=None))

    @pytest.mark.asyncio
    async def test_delete_keeps_other_selection(self, service, voices, users):
        voices.get_voice.return_value = SavedVoice(id="v1", name="Mom", user_id="user-123")
        users.get_settings.return_value = UserSettings(selected_voice_id="v2")

        await service.delete_saved_voice("user-123", "v1")

        users.save_settings.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_someone_elses_voice(self, service, voices):
        voices.get_voice.return_value = SavedVoice(id="v1", name="Mom", user_id="other")

        assert await _code(service.delete_saved_voice("user-123", "v1")) == "permission-denied"
        voices.delete_voice.assert_not_called()

    @pytest.mark.asyncio
    async def test_select_unowned_voice(self, service, voices):
        voices.get_voice.return_value = SavedVoice(id="v1", name="Mom", user_id="other")

        assert await _code(service.select_voice("user-123", "v1")) == "not-found"

    @pytest.mark.asyncio
    async def test_select_default_narrator(self, service, voices, users):
        await service.select_voice("user-123", None)

        voices.get_voice.assert_not_called()
        users.save_settings.assert_awaited_once_with("user-123", UserSettings(selected_voice_id=None))

    @pytest.mark.asyncio
    async def test_save_voice(self, service, voices):
        voice = await service.save_voice("user-123", "v1", "Mom", SAMPLE_PATH)

        assert voice.user_id == "user-123"
        assert voice.sample_storage_path == SAMPLE_PATH
        voices.save_voice.assert_awaited_once_with(voice)
