"""HTTP API routes for folders."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Response, status

from ...models.document import DocumentSummary
from ...models.folder import Folder, FolderCreate, FolderTreeNode
from ...services.documents import DocumentService
from ...services.folders import FolderService
from ...workspace.folder_tree import build_folder_tree
from ..dependencies import get_document_service, get_folder_service
from ..middleware import AuthContext, get_auth_context

router = APIRouter()


@router.get("/api/folders", response_model=List[Folder])
async def list_folders(
    auth: AuthContext = Depends(get_auth_context),
    folders: FolderService = Depends(get_folder_service),
):
    """Flat folder list of the caller."""
    return folders.list_folders(auth.user_id)


@router.get("/api/folders/tree", response_model=List[FolderTreeNode])
async def folder_tree(
    auth: AuthContext = Depends(get_auth_context),
    folders: FolderService = Depends(get_folder_service),
):
    """Folders assembled into a forest (orphans become roots)."""
    return list(build_folder_tree(folders.list_folders(auth.user_id)))


@router.post("/api/folders", response_model=Folder, status_code=status.HTTP_201_CREATED)
async def create_folder(
    create: FolderCreate,
    auth: AuthContext = Depends(get_auth_context),
    folders: FolderService = Depends(get_folder_service),
):
    return folders.create_folder(auth.user_id, create.name, create.parent_id)


@router.delete("/api/folders/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_folder(
    folder_id: str,
    auth: AuthContext = Depends(get_auth_context),
    folders: FolderService = Depends(get_folder_service),
):
    """Delete a folder together with its subfolders and documents."""
    folders.delete_folder(auth.user_id, folder_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/api/folders/{folder_id}/documents", response_model=List[DocumentSummary])
async def list_folder_documents(
    folder_id: str,
    auth: AuthContext = Depends(get_auth_context),
    folders: FolderService = Depends(get_folder_service),
    documents: DocumentService = Depends(get_document_service),
):
    folders.get_folder(folder_id, auth.user_id)
    return [
        DocumentSummary(id=d.id, folder_id=d.folder_id, title=d.title, updated_at=d.updated_at)
        for d in documents.list_documents(auth.user_id, folder_id)
    ]
