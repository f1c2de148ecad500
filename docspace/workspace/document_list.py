"""Document list of one folder: optimistic list, search and batch mode."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple
import uuid

from ..models.ai import BatchResult
from ..models.document import Document
from ..services.errors import InvalidInputError
from .batch import DEFAULT_RESULT_TTL, BatchProcessor, TransformFunc
from .interfaces import DocumentBackend
from .notices import NoticeBoard
from .optimistic import OptimisticStore
from .search import DEFAULT_SEARCH_DELAY, SearchController

logger = logging.getLogger(__name__)


class DocumentListView:
    """Owns the documents shown for a folder and the handlers acting on them."""

    def __init__(
        self,
        backend: DocumentBackend,
        folder_id: str,
        transform: TransformFunc,
        *,
        documents: Iterable[Document] = (),
        notices: Optional[NoticeBoard] = None,
        search_delay: float = DEFAULT_SEARCH_DELAY,
        result_ttl: float = DEFAULT_RESULT_TTL,
    ) -> None:
        self.backend = backend
        self.folder_id = folder_id
        self.notices = notices or NoticeBoard()
        self.store: OptimisticStore[Document] = OptimisticStore(
            documents,
            write_add=self._write_add,
            write_delete=self._write_delete,
            prepend=True,
            on_error=self._report_error,
        )
        self.search = SearchController(
            backend,
            self.store,
            folder_id,
            delay=search_delay,
            on_error=lambda exc: self.notices.error(f"Search failed: {exc}"),
        )
        self.batch = BatchProcessor(transform, result_ttl=result_ttl, on_complete=self._after_batch)

    async def _write_add(self, document: Document) -> Document:
        return await self.backend.create_document(
            document.title, document.folder_id, document.content, document_id=document.id
        )

    async def _write_delete(self, document: Document) -> None:
        await self.backend.delete_document(document.id)

    def _report_error(self, action: str, exc: BaseException) -> None:
        verb = "create" if action == "add" else "delete"
        self.notices.error(f"Failed to {verb} document: {exc}")

    @property
    def displayed(self) -> Tuple[Document, ...]:
        """Search results while a query is active, the folder listing otherwise."""
        return self.search.displayed

    async def reload(self) -> bool:
        try:
            documents = await self.backend.list_documents(self.folder_id)
        except Exception as exc:
            logger.warning("Failed to load documents of %s: %s", self.folder_id, exc)
            self.notices.error(f"Failed to load documents: {exc}")
            return False
        self.store.refresh(documents)
        return True

    async def create_document(self, title: str) -> Optional[Document]:
        """Create an empty document; blank titles never reach the backend."""
        cleaned = (title or "").strip()
        if not cleaned:
            self.notices.error("Document title is required")
            return None
        document = Document(id=str(uuid.uuid4()), folder_id=self.folder_id, title=cleaned)
        if not await self.store.add(document):
            return None
        await self.reload()
        return document

    async def delete_document(self, document_id: str) -> bool:
        document = next((d for d in self.store.displayed if d.id == document_id), None)
        if document is None:
            document = Document(id=document_id, folder_id=self.folder_id, title="")
        ok = await self.store.delete(document)
        if ok:
            await self.reload()
        return ok

    async def run_batch(self, config_id: str, prompt_id: str) -> Optional[BatchResult]:
        try:
            return await self.batch.run(config_id, prompt_id)
        except (InvalidInputError, RuntimeError) as exc:
            self.notices.error(str(exc))
            return None

    async def _after_batch(self, result: BatchResult) -> None:
        text = f"Batch finished: {result.success} of {result.total} succeeded, {result.fail} failed"
        if result.fail:
            self.notices.error(text)
        else:
            self.notices.success(text)
        await self.reload()


__all__ = ["DocumentListView"]
