# expense_api/api/v1/routes/profile.py
from fastapi import APIRouter, Depends, Request

from expense_api.api.deps import get_current_user
from expense_api.core.auth import User, UserManager, get_user_manager
from expense_api.schemas.user import ProfileRead, ProfileUpdate, UserUpdate

router = APIRouter(prefix="/profile", tags=["User Management"])


def _avatar_url(request: Request, avatar_path):
    if not avatar_path:
        return None
    return f"{str(request.base_url).rstrip('/')}{avatar_path}"


# 1) GET /profile
@router.get("", response_model=ProfileRead)
async def read_own_profile(
    request: Request,
    user: User = Depends(get_current_user),
):
    """Get current user's profile"""
    return ProfileRead(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        monthly_income=user.monthly_income,
        currency=user.currency,
        avatar_url=_avatar_url(request, user.avatar_path),
        has_password=user.has_password,
        oauth_provider=user.oauth_provider,
    )


# 2) PUT /profile
@router.put("")
async def update_own_profile(
    profile_in: ProfileUpdate,
    request: Request,
    user: User = Depends(get_current_user),
    user_manager: UserManager = Depends(get_user_manager),
):
    """Update display name, monthly income and currency"""
    await user_manager.update(
        UserUpdate(**profile_in.model_dump()),
        user,
        safe=True,
        request=request,
    )
    return {"ok": True}
