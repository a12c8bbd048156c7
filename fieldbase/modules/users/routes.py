from fastapi import APIRouter, Depends
from fieldbase.database.supabase_client import get_supabase
from fieldbase.core.dependencies import require_auth
from fieldbase.core.responses import ActionResult, success
from fieldbase.modules.auth.schemas import CurrentUser
from fieldbase.modules.users.schemas import ProfileResponse, ProfileUpdate
from fieldbase.modules.users.service import UserService
from supabase import Client

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("/me", response_model=ActionResult[ProfileResponse])
async def get_my_profile(
    current_user: CurrentUser = Depends(require_auth),
    service: UserService = Depends(get_user_service)
):
    """Get the profile of the authenticated user"""
    return success(service.get_profile(current_user.id))


@router.put("/me", response_model=ActionResult[ProfileResponse])
async def update_my_profile(
    profile_data: ProfileUpdate,
    current_user: CurrentUser = Depends(require_auth),
    service: UserService = Depends(get_user_service)
):
    """Update the display name of the authenticated user"""
    return success(service.update_profile(current_user.id, profile_data))
