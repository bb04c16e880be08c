"""Current-user endpoints."""

from fastapi import APIRouter

from ..dependencies import CurrentUser, Users
from ..models.documents import UserProfile, UserSettings
from ..models.requests import UpdateUserSettingsRequest

router = APIRouter()


@router.get("/me", response_model=UserProfile, summary="Get the caller's profile")
async def get_profile(service: Users, user: CurrentUser):
    return await service.get_profile(user.uid)


@router.get("/me/settings", response_model=UserSettings, summary="Get the caller's settings")
async def get_settings(service: Users, user: CurrentUser):
    return await service.get_settings(user.uid)


@router.put("/me/settings", response_model=UserSettings, summary="Save the caller's settings")
async def save_settings(request: UpdateUserSettingsRequest, service: Users, user: CurrentUser):
    return await service.save_settings(user.uid, request)
