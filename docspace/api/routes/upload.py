"""Shared-secret ingestion endpoint for trusted external callers."""

from __future__ import annotations

import logging
import secrets
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status

from ...models.upload import UploadFolder, UploadFolderList, UploadRequest, UploadResponse
from ...services.config import get_config
from ...services.documents import DocumentService
from ...services.folders import FolderService
from ..dependencies import get_document_service, get_folder_service

logger = logging.getLogger(__name__)

router = APIRouter()


def secret_matches(provided: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison; an unset secret never matches."""
    if not provided or not expected:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def require_api_key(
    x_api_key: Annotated[Optional[str], Header(alias="x-api-key")] = None,
) -> None:
    if not secret_matches(x_api_key, get_config().api_secret):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "unauthorized", "message": "Invalid API key"},
        )


@router.get("/api/upload", response_model=UploadFolderList, dependencies=[Depends(require_api_key)])
async def list_upload_folders(folders: FolderService = Depends(get_folder_service)):
    """Every folder, so callers can pick a destination."""
    return UploadFolderList(
        folders=[
            UploadFolder(id=f.id, name=f.name, parent_id=f.parent_id)
            for f in folders.list_all_folders()
        ]
    )


@router.post(
    "/api/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_api_key)],
)
async def upload_document(
    upload: UploadRequest,
    documents: DocumentService = Depends(get_document_service),
):
    """Create a document in an existing folder; it belongs to the folder's owner."""
    document = documents.create_document(None, upload.title, upload.folder_id, upload.content)
    logger.info("Ingested document %s into folder %s", document.id, upload.folder_id)
    return UploadResponse(success=True, id=document.id)
