"""FastAPI dependency injection for services and repositories."""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.elevenlabs import ElevenLabsClient
from .auth.tokens import AuthUser, user_from_claims, verify_token
from .database.firebase import get_bucket, get_firestore
from .database.repository import (
    AdminConfigRepository,
    BookRepository,
    DraftRepository,
    UserRepository,
    VoiceRepository,
)
from .database.storage import BlobStorage
from .errors import unauthenticated
from .services.admin_service import AdminService
from .services.book_service import BookService
from .services.draft_service import DraftService
from .services.generation_service import GenerationService
from .services.translation_service import TranslationService
from .services.user_service import UserService
from .services.voice_service import VoiceService

# Missing credentials are reported as an "unauthenticated" callable error
security = HTTPBearer(auto_error=False)


# Clients
def get_db():
    """Get the async Firestore client."""
    return get_firestore()


def get_storage() -> BlobStorage:
    return BlobStorage(get_bucket())


def get_elevenlabs() -> ElevenLabsClient:
    return ElevenLabsClient()


Database = Annotated[object, Depends(get_db)]
Storage = Annotated[BlobStorage, Depends(get_storage)]
ElevenLabs = Annotated[ElevenLabsClient, Depends(get_elevenlabs)]


# Repositories - require the Firestore client
def get_book_repository(db: Database) -> BookRepository:
    return BookRepository(db)


def get_draft_repository(db: Database) -> DraftRepository:
    return DraftRepository(db)


def get_user_repository(db: Database) -> UserRepository:
    return UserRepository(db)


def get_voice_repository(db: Database) -> VoiceRepository:
    return VoiceRepository(db)


def get_admin_config_repository(db: Database) -> AdminConfigRepository:
    return AdminConfigRepository(db)


BookRepo = Annotated[BookRepository, Depends(get_book_repository)]
DraftRepo = Annotated[DraftRepository, Depends(get_draft_repository)]
UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
VoiceRepo = Annotated[VoiceRepository, Depends(get_voice_repository)]
AdminConfigRepo = Annotated[AdminConfigRepository, Depends(get_admin_config_repository)]


# Services - depend on repositories
def get_generation_service() -> GenerationService:
    return GenerationService()


def get_voice_service(
    elevenlabs: ElevenLabs,
    storage: Storage,
    users: UserRepo,
    voices: VoiceRepo,
) -> VoiceService:
    return VoiceService(elevenlabs, storage, users, voices)


def get_book_service(
    books: BookRepo,
    drafts: DraftRepo,
    storage: Storage,
    admins: AdminConfigRepo,
    elevenlabs: ElevenLabs,
) -> BookService:
    return BookService(books, drafts, storage, admins, elevenlabs)


def get_draft_service(drafts: DraftRepo) -> DraftService:
    return DraftService(drafts)


def get_translation_service(books: BookRepo) -> TranslationService:
    return TranslationService(books)


def get_user_service(users: UserRepo) -> UserService:
    return UserService(users)


def get_admin_service(admins: AdminConfigRepo, books: BookRepo, users: UserRepo) -> AdminService:
    return AdminService(admins, books, users)


Generation = Annotated[GenerationService, Depends(get_generation_service)]
Voices = Annotated[VoiceService, Depends(get_voice_service)]
Books = Annotated[BookService, Depends(get_book_service)]
Drafts = Annotated[DraftService, Depends(get_draft_service)]
Translations = Annotated[TranslationService, Depends(get_translation_service)]
Users = Annotated[UserService, Depends(get_user_service)]
Admin = Annotated[AdminService, Depends(get_admin_service)]


# Authentication dependencies
async def get_optional_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)]
) -> Optional[AuthUser]:
    """Return the caller if a valid ID token was sent, else None."""
    if credentials is None:
        return None
    claims = verify_token(credentials.credentials)
    return user_from_claims(claims) if claims else None


async def get_current_user(
    user: Annotated[Optional[AuthUser], Depends(get_optional_user)]
) -> AuthUser:
    """Require a verified caller.

    Raises:
        CallableError: unauthenticated if the token is missing, invalid or expired
    """
    if user is None:
        raise unauthenticated("Authentication required")
    return user


CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
OptionalUser = Annotated[Optional[AuthUser], Depends(get_optional_user)]
