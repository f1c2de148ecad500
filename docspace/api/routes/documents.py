"""HTTP API routes for documents."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ...models.document import Document, DocumentCreate, DocumentUpdate
from ...services.documents import DocumentService
from ..dependencies import get_document_service
from ..middleware import AuthContext, get_auth_context

router = APIRouter()


@router.post("/api/documents", response_model=Document, status_code=status.HTTP_201_CREATED)
async def create_document(
    create: DocumentCreate,
    auth: AuthContext = Depends(get_auth_context),
    documents: DocumentService = Depends(get_document_service),
):
    """Create a document in one of the caller's folders."""
    return documents.create_document(auth.user_id, create.title, create.folder_id, create.content)


@router.get("/api/documents/{document_id}", response_model=Document)
async def get_document(
    document_id: str,
    auth: AuthContext = Depends(get_auth_context),
    documents: DocumentService = Depends(get_document_service),
):
    return documents.get_document(auth.user_id, document_id)


@router.patch("/api/documents/{document_id}", response_model=Document)
async def update_document(
    document_id: str,
    update: DocumentUpdate,
    auth: AuthContext = Depends(get_auth_context),
    documents: DocumentService = Depends(get_document_service),
):
    """Partial update; autosave sends only the fields that changed."""
    return documents.update_document(auth.user_id, document_id, **update.changes())


@router.delete("/api/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: str,
    auth: AuthContext = Depends(get_auth_context),
    documents: DocumentService = Depends(get_document_service),
):
    documents.delete_document(auth.user_id, document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
