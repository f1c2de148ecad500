"""HTTP API routes for title search."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...models.document import DocumentSummary
from ...services.documents import DocumentService
from ..dependencies import get_document_service
from ..middleware import AuthContext, get_auth_context

router = APIRouter()


@router.get("/api/search", response_model=List[DocumentSummary])
async def search_documents(
    q: str = Query("", max_length=256, description="Title substring"),
    folder_id: Optional[str] = Query(None, description="Restrict to one folder"),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of results"),
    auth: AuthContext = Depends(get_auth_context),
    documents: DocumentService = Depends(get_document_service),
):
    """Case-insensitive title search; a blank query returns nothing."""
    if not q.strip():
        return []
    results = documents.search_documents(auth.user_id, q, folder_id, limit=limit)
    return [
        DocumentSummary(id=d.id, folder_id=d.folder_id, title=d.title, updated_at=d.updated_at)
        for d in results
    ]
