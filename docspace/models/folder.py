"""Folder-related Pydantic models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Folder(BaseModel):
    """A folder record as stored by the backend (flat parent pointer)."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "6f1c2a1e-4a57-4d5e-9f0e-2f8f5f7f1a10",
                "user_id": "alice",
                "name": "Notes",
                "parent_id": None,
                "created": "2025-01-10T09:00:00Z",
            }
        },
    )

    id: str = Field(..., description="Opaque folder identifier")
    user_id: str = Field("", description="Owner user ID")
    name: str = Field(..., min_length=1, max_length=256, description="Display name")
    parent_id: Optional[str] = Field(None, description="Parent folder ID (None for roots)")
    created: Optional[datetime] = Field(None, description="Creation timestamp")


class FolderCreate(BaseModel):
    """Request payload to create a folder."""

    name: str = Field(..., min_length=1, max_length=256)
    parent_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Folder name must not be blank")
        return cleaned


class FolderTreeNode(BaseModel):
    """Read-only tree view of a folder and its descendants."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    parent_id: Optional[str] = None
    children: tuple[FolderTreeNode, ...] = ()


FolderTreeNode.model_rebuild()


__all__ = ["Folder", "FolderCreate", "FolderTreeNode"]
