"""HTTP API routes for the caller's own account."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...models.ai import AiSettings, AiSettingsView
from ...models.auth import TokenResponse
from ...models.user import ProfileUpdate, User, UserProfile, UserRole
from ...services.auth import AuthService
from ...services.users import UserService
from ..dependencies import get_users
from ..middleware import AuthContext, get_auth_context

router = APIRouter()


def to_profile(user: User, users: UserService) -> UserProfile:
    """Client view of a user; AI secrets never leave the server."""
    is_admin = users.is_admin(user)
    return UserProfile(
        user_id=user.user_id,
        email=user.email,
        role=UserRole.ADMIN if is_admin else user.role,
        is_admin=is_admin,
        avatar=user.metadata.get("avatar"),
        site_name=user.metadata.get("site_name"),
        site_gradient=user.metadata.get("site_gradient"),
    )


@router.get("/api/me", response_model=UserProfile)
async def get_me(
    auth: AuthContext = Depends(get_auth_context),
    users: UserService = Depends(get_users),
):
    return to_profile(users.ensure_user(auth.user_id), users)


@router.patch("/api/me/profile", response_model=UserProfile)
async def update_profile(
    update: ProfileUpdate,
    auth: AuthContext = Depends(get_auth_context),
    users: UserService = Depends(get_users),
):
    """Merge avatar and branding fields into the caller's metadata."""
    user = users.update_profile(auth.user_id, **update.model_dump(exclude_none=True))
    return to_profile(user, users)


@router.get("/api/me/ai-settings", response_model=AiSettingsView)
async def get_ai_settings(
    auth: AuthContext = Depends(get_auth_context),
    users: UserService = Depends(get_users),
):
    """The caller's own model configs (keys masked) and prompt templates."""
    user = users.ensure_user(auth.user_id)
    return AiSettingsView.from_settings(user.ai_settings())


@router.put("/api/me/ai-settings", response_model=AiSettingsView)
async def put_ai_settings(
    settings: AiSettings,
    auth: AuthContext = Depends(get_auth_context),
    users: UserService = Depends(get_users),
):
    """Replace configs and prompts; a blank api_key keeps the stored one."""
    return AiSettingsView.from_settings(users.update_ai_settings(auth.user_id, settings))


@router.post("/api/tokens", response_model=TokenResponse)
async def create_api_token(auth: AuthContext = Depends(get_auth_context)):
    """Issue a new JWT for the authenticated user."""
    token, expires_at = AuthService().issue_token_response(auth.user_id)
    return TokenResponse(token=token, token_type="bearer", expires_at=expires_at)
