"""Voice endpoints: cloning, narration, registration and saved voices."""

from fastapi import APIRouter, status

from ..dependencies import CurrentUser, OptionalUser, Voices
from ..models.requests import (
    AddVoiceRequest,
    RegisterVoiceRequest,
    SaveVoiceRequest,
    SelectVoiceRequest,
    SpeechRequest,
)
from ..models.responses import (
    AudioResponse,
    RegisterVoiceResponse,
    SavedVoiceListResponse,
    SelectedVoiceResponse,
    VoiceIdResponse,
    VoiceStatusResponse,
)
from ..models.documents import SavedVoice

router = APIRouter()


@router.post("/clone", response_model=VoiceIdResponse, summary="Clone a voice from a sample")
async def add_voice(request: AddVoiceRequest, service: Voices, user: CurrentUser):
    voice_id = await service.add_voice(request.name, request.audio_base64, request.description)
    return VoiceIdResponse(voice_id=voice_id)


@router.post(
    "/speech",
    response_model=AudioResponse,
    summary="Narrate text",
    description="Returns base64 MP3. Without a voiceId the default narrator is used.",
)
async def generate_speech(request: SpeechRequest, service: Voices, user: OptionalUser):
    audio = await service.generate_speech(request.text, request.voice_id)
    return AudioResponse(audio_base64=audio)


@router.post(
    "/register",
    response_model=RegisterVoiceResponse,
    summary="Register the caller's voice",
    description="Clone an uploaded sample and narrate the library with it in the background.",
)
async def register_voice(request: RegisterVoiceRequest, service: Voices, user: CurrentUser):
    voice_id = await service.register_voice(user.uid, request.storage_path, request.name)
    return RegisterVoiceResponse(voice_id=voice_id)


@router.get("/status", response_model=VoiceStatusResponse, summary="Narration job status")
async def get_status(service: Voices, user: CurrentUser):
    generation_status, has_voice = await service.get_status(user.uid)
    return VoiceStatusResponse(status=generation_status, has_active_voice=has_voice)


@router.get("/saved", response_model=SavedVoiceListResponse, summary="List saved voices")
async def list_saved_voices(service: Voices, user: CurrentUser):
    return SavedVoiceListResponse(voices=await service.list_saved_voices(user.uid))


@router.post(
    "/saved",
    response_model=SavedVoice,
    status_code=status.HTTP_201_CREATED,
    summary="Save a voice",
)
async def save_voice(request: SaveVoiceRequest, service: Voices, user: CurrentUser):
    return await service.save_voice(user.uid, request.voice_id, request.name, request.sample_storage_path)


@router.delete(
    "/saved/{voice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a saved voice",
)
async def delete_saved_voice(voice_id: str, service: Voices, user: CurrentUser):
    await service.delete_saved_voice(user.uid, voice_id)


@router.get("/selected", response_model=SelectedVoiceResponse, summary="Get the selected voice")
async def get_selected_voice(service: Voices, user: CurrentUser):
    return SelectedVoiceResponse(voice_id=await service.get_selected_voice(user.uid))


@router.put(
    "/selected",
    response_model=SelectedVoiceResponse,
    summary="Select a voice",
    description="A null voiceId selects the default narrator.",
)
async def select_voice(request: SelectVoiceRequest, service: Voices, user: CurrentUser):
    await service.select_voice(user.uid, request.voice_id)
    return SelectedVoiceResponse(voice_id=request.voice_id)


@router.delete(
    "/{voice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a cloned voice",
    description="Non-2xx provider responses are logged, not raised.",
)
async def delete_voice(voice_id: str, service: Voices, user: CurrentUser):
    await service.delete_voice(voice_id)
