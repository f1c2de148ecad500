"""HTTP API routes for AI transformations (single and batch)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ...models.ai import (
    BatchResult,
    BatchTransformRequest,
    TransformErrorCode,
    TransformRequest,
    TransformResult,
)
from ...workspace.batch import process_sequentially
from ...workspace.transform import DocumentTransformer
from ..dependencies import get_transformer

logger = logging.getLogger(__name__)

router = APIRouter()

FAILURE_STATUS = {
    TransformErrorCode.DOCUMENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    TransformErrorCode.CONFIG_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    TransformErrorCode.PROMPT_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    TransformErrorCode.MODEL_HTTP_ERROR: status.HTTP_502_BAD_GATEWAY,
    TransformErrorCode.MODEL_BAD_RESPONSE: status.HTTP_502_BAD_GATEWAY,
    TransformErrorCode.MODEL_UNREACHABLE: status.HTTP_504_GATEWAY_TIMEOUT,
    TransformErrorCode.STORAGE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@router.post("/api/documents/{document_id}/transform", response_model=TransformResult)
async def transform_document(
    document_id: str,
    request: TransformRequest,
    transformer: DocumentTransformer = Depends(get_transformer),
):
    """
    Run a prompt template over a document and store the output as a new document.

    Failures keep the result body and carry a status matching the error code.
    """
    result = await transformer.transform(document_id, request.config_id, request.prompt_id)
    if result.ok:
        return result
    return JSONResponse(
        status_code=FAILURE_STATUS.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content=result.model_dump(mode="json"),
    )


@router.post("/api/batch/transform", response_model=BatchResult)
async def batch_transform(
    request: BatchTransformRequest,
    transformer: DocumentTransformer = Depends(get_transformer),
):
    """Transform each document in order; one failure never stops the run."""
    logger.info("Batch transform of %d documents", len(request.document_ids))
    return await process_sequentially(
        request.document_ids,
        request.config_id,
        request.prompt_id,
        transformer.transform,
    )
