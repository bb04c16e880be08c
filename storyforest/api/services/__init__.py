"""Service layer for the Storyforest API."""

from .admin_service import AdminService
from .audio_generation import AudioGenerationJob, generate_user_audio
from .book_service import BookService
from .draft_service import DraftService
from .generation_service import GenerationService
from .translation_service import TranslationService
from .user_service import UserService
from .voice_service import VoiceService

__all__ = [
    "AdminService",
    "AudioGenerationJob",
    "generate_user_audio",
    "BookService",
    "DraftService",
    "GenerationService",
    "TranslationService",
    "UserService",
    "VoiceService",
]
