"""Models for the shared-secret ingestion endpoint."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class UploadRequest(BaseModel):
    """Document pushed by a trusted external caller."""

    title: str = Field(..., min_length=1, max_length=512)
    content: str = Field("", description="Markdown content")
    folder_id: str = Field(..., min_length=1)


class UploadResponse(BaseModel):
    success: bool = True
    id: str


class UploadFolder(BaseModel):
    id: str
    name: str
    parent_id: Optional[str] = None


class UploadFolderList(BaseModel):
    """Folder listing so external callers can discover folder IDs."""

    folders: List[UploadFolder] = Field(default_factory=list)


__all__ = ["UploadRequest", "UploadResponse", "UploadFolder", "UploadFolderList"]
