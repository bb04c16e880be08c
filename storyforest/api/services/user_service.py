"""User profile and settings service."""

from ..database.repository import UserRepository
from ..models.documents import UserProfile, UserSettings
from ..models.requests import UpdateUserSettingsRequest


class UserService:
    def __init__(self, users: UserRepository):
        self.users = users

    async def get_profile(self, uid: str) -> UserProfile:
        return await self.users.get_user(uid) or UserProfile(uid=uid)

    async def get_settings(self, uid: str) -> UserSettings:
        """The voice selection plus the language kept on the profile."""
        settings = await self.users.get_settings(uid)
        profile = await self.users.get_user(uid)
        return settings.model_copy(update={"preferred_language": profile.preferred_language if profile else None})

    async def save_settings(self, uid: str, request: UpdateUserSettingsRequest) -> UserSettings:
        """Create or update a user's settings. Only fields present in the request change."""
        settings = await self.users.get_settings(uid)
        if "selected_voice_id" in request.model_fields_set:
            settings.selected_voice_id = request.selected_voice_id
        await self.users.save_settings(uid, settings)

        if request.preferred_language:
            await self.users.update_user(uid, {"preferredLanguage": request.preferred_language})
            language = request.preferred_language
        else:
            profile = await self.users.get_user(uid)
            language = profile.preferred_language if profile else None
        return settings.model_copy(update={"preferred_language": language})
