"""Admin endpoints."""

from fastapi import APIRouter

from ..dependencies import Admin, CurrentUser
from ..errors import permission_denied
from ..models.responses import AdminConfigResponse, AdminLoginResponse

router = APIRouter()


@router.post(
    "/register-login",
    response_model=AdminLoginResponse,
    summary="Register an admin login",
    description="Records the caller's uid as the admin and migrates official books to it.",
)
async def register_admin_login(service: Admin, user: CurrentUser):
    migrated = await service.register_admin_login(user)
    return AdminLoginResponse(migrated_books=migrated)


@router.get("/config", response_model=AdminConfigResponse, summary="Get the admin config")
async def get_admin_config(service: Admin, user: CurrentUser):
    if not service.is_admin_email(user.email):
        raise permission_denied("Not an admin user")
    admin_config = await service.get_config()
    return AdminConfigResponse(uids=admin_config.uids, migrated=admin_config.migrated)
