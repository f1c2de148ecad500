"""HTTP API routes for administrators."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status

from ...models.user import RoleUpdate, User, UserCreate, UserProfile
from ...services.users import UserService
from ..dependencies import get_users
from ..middleware import require_admin
from .me import to_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin")


@router.get("/users", response_model=List[UserProfile])
async def list_users(
    admin: User = Depends(require_admin),
    users: UserService = Depends(get_users),
):
    return [to_profile(user, users) for user in users.list_users()]


@router.post("/users", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
async def create_user(
    create: UserCreate,
    admin: User = Depends(require_admin),
    users: UserService = Depends(get_users),
):
    user = users.create_user(create.email, create.role, create.user_id)
    logger.info("Admin %s created user %s", admin.user_id, user.user_id)
    return to_profile(user, users)


@router.patch("/users/{user_id}/role", response_model=UserProfile)
async def update_role(
    user_id: str,
    update: RoleUpdate,
    admin: User = Depends(require_admin),
    users: UserService = Depends(get_users),
):
    return to_profile(users.update_user_role(user_id, update.role), users)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    users: UserService = Depends(get_users),
):
    """Delete an account and everything it owns; admins cannot delete themselves."""
    users.delete_user(admin.user_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
