"""Document-related Pydantic models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_CONTENT_BYTES = 1_048_576


class Document(BaseModel):
    """Complete Markdown document."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "0b7d4a1c-2c1f-4f8e-8d43-7f0e1c9a2b55",
                "user_id": "alice",
                "folder_id": "6f1c2a1e-4a57-4d5e-9f0e-2f8f5f7f1a10",
                "title": "Draft",
                "content": "# Draft\n\nFirst thoughts...",
                "created": "2025-01-10T09:00:00Z",
                "updated_at": "2025-01-15T14:30:00Z",
            }
        },
    )

    id: str = Field(..., description="Opaque document identifier")
    user_id: str = Field("", description="Owner user ID")
    folder_id: str = Field(..., description="Containing folder ID")
    title: str = Field(..., description="Display title")
    content: str = Field("", description="Markdown source")
    created: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")


class DocumentCreate(BaseModel):
    """Request payload to create a document."""

    title: str = Field(..., min_length=1, max_length=512)
    folder_id: str = Field(..., min_length=1)
    content: str = Field("", max_length=MAX_CONTENT_BYTES)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Document title must not be blank")
        return cleaned


class DocumentUpdate(BaseModel):
    """Partial update: only the fields that changed are sent."""

    title: Optional[str] = Field(None, max_length=512)
    content: Optional[str] = Field(None, max_length=MAX_CONTENT_BYTES)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Document title must not be blank")
        return cleaned

    @model_validator(mode="after")
    def _require_a_field(self) -> "DocumentUpdate":
        if self.title is None and self.content is None:
            raise ValueError("At least one of 'title' or 'content' must be provided")
        return self

    def changes(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


class DocumentSummary(BaseModel):
    """Lightweight representation used for listings."""

    id: str
    folder_id: str
    title: str
    updated_at: Optional[datetime] = None


__all__ = ["Document", "DocumentCreate", "DocumentUpdate", "DocumentSummary", "MAX_CONTENT_BYTES"]
