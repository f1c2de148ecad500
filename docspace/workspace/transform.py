"""Single-document AI transformation.

Used interactively from the editor and once per item by the batch
processor. A transformation never edits the source document: the model
output is stored as a new document next to it.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from ..models.ai import TransformErrorCode, TransformResult
from .interfaces import (
    AiSettingsProvider,
    DocumentBackend,
    ModelHTTPError,
    ModelInvoker,
    ModelResponseError,
    ModelUnavailableError,
)

logger = logging.getLogger(__name__)

TITLE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


def derived_title(source_title: str, config_name: str, when: datetime) -> str:
    """Title of a generated document: source, config and time it ran."""
    return f"{source_title} - {config_name} - {when.strftime(TITLE_TIMESTAMP_FORMAT)}"


class DocumentTransformer:
    """Run a prompt template against a document through a configured model."""

    def __init__(
        self,
        documents: DocumentBackend,
        invoker: ModelInvoker,
        settings: AiSettingsProvider,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.documents = documents
        self.invoker = invoker
        self.settings = settings
        self.clock = clock

    async def transform(self, document_id: str, config_id: str, prompt_id: str) -> TransformResult:
        """
        Transform one document.

        Every failure is returned as a TransformResult with a distinct error
        code; exceptions from collaborators do not escape.
        """
        try:
            document = await self.documents.get_document(document_id)
        except Exception as exc:
            logger.error(f"Failed to load document {document_id}: {exc}")
            return TransformResult.failure(TransformErrorCode.STORAGE_ERROR, str(exc))
        if document is None:
            return TransformResult.failure(
                TransformErrorCode.DOCUMENT_NOT_FOUND, f"Document not found: {document_id}"
            )

        try:
            ai_settings = await self.settings.get_ai_settings()
        except Exception as exc:
            logger.error(f"Failed to load AI settings: {exc}")
            return TransformResult.failure(TransformErrorCode.STORAGE_ERROR, str(exc))

        config = ai_settings.find_config(config_id)
        if config is None:
            return TransformResult.failure(
                TransformErrorCode.CONFIG_NOT_FOUND, f"Model config not found: {config_id}"
            )
        prompt = ai_settings.find_prompt(prompt_id)
        if prompt is None:
            return TransformResult.failure(
                TransformErrorCode.PROMPT_NOT_FOUND, f"Prompt not found: {prompt_id}"
            )

        logger.info(
            "Transforming document %s with config %s (%s) and prompt %s",
            document_id,
            config.id,
            config.model,
            prompt.id,
        )
        try:
            output = await self.invoker.invoke(
                config.base_url,
                config.api_key,
                config.model,
                prompt.content,
                document.content,
            )
        except ModelHTTPError as exc:
            return TransformResult.failure(TransformErrorCode.MODEL_HTTP_ERROR, str(exc))
        except ModelResponseError as exc:
            return TransformResult.failure(TransformErrorCode.MODEL_BAD_RESPONSE, str(exc))
        except ModelUnavailableError as exc:
            return TransformResult.failure(TransformErrorCode.MODEL_UNREACHABLE, str(exc))
        except Exception as exc:
            logger.exception("Unexpected model invocation failure for %s", document_id)
            return TransformResult.failure(TransformErrorCode.MODEL_UNREACHABLE, str(exc))

        title = derived_title(document.title, config.name, self.clock())
        try:
            created = await self.documents.create_document(title, document.folder_id, output)
        except Exception as exc:
            logger.error(f"Failed to store transformation of {document_id}: {exc}")
            return TransformResult.failure(TransformErrorCode.STORAGE_ERROR, str(exc))

        return TransformResult.success(created.id, created.title)


__all__ = ["DocumentTransformer", "derived_title", "TITLE_TIMESTAMP_FORMAT"]
