"""User and profile models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .ai import AiSettings


class UserRole(str, Enum):
    """Account roles."""

    ADMIN = "admin"
    USER = "user"


# Metadata keys a user may change on their own profile.
PROFILE_KEYS = ("avatar", "site_name", "site_gradient")


class User(BaseModel):
    """User account with its free-form metadata."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "alice",
                "email": "alice@example.com",
                "metadata": {"role": "admin", "avatar": "🦊", "site_name": "DocSpace"},
                "created": "2025-01-15T10:30:00Z",
            }
        }
    )

    user_id: str = Field(..., min_length=1, max_length=64, description="Internal user ID")
    email: Optional[str] = Field(None, description="Account email")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Role, branding, AI lists")
    created: Optional[datetime] = Field(None, description="Account creation timestamp")

    @property
    def role(self) -> UserRole:
        try:
            return UserRole(self.metadata.get("role", UserRole.USER.value))
        except ValueError:
            return UserRole.USER

    def ai_settings(self) -> AiSettings:
        return AiSettings(
            configs=self.metadata.get("ai_configs") or [],
            prompts=self.metadata.get("ai_prompts") or [],
        )


class UserProfile(BaseModel):
    """Client-facing user view (AI secrets stripped)."""

    user_id: str
    email: Optional[str] = None
    role: UserRole = UserRole.USER
    is_admin: bool = False
    avatar: Optional[str] = None
    site_name: Optional[str] = None
    site_gradient: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Request payload for PATCH /api/me/profile."""

    avatar: Optional[str] = Field(None, max_length=32)
    site_name: Optional[str] = Field(None, max_length=64)
    site_gradient: Optional[str] = Field(None, max_length=128)


class UserCreate(BaseModel):
    """Admin request to create an account."""

    user_id: Optional[str] = Field(None, min_length=1, max_length=64)
    email: str = Field(..., min_length=3, max_length=256)
    role: UserRole = UserRole.USER


class RoleUpdate(BaseModel):
    """Admin request to change a user's role."""

    role: UserRole


__all__ = [
    "User",
    "UserRole",
    "UserProfile",
    "ProfileUpdate",
    "UserCreate",
    "RoleUpdate",
    "PROFILE_KEYS",
]
