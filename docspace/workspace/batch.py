"""Batch mode: select documents and transform them one at a time.

Items are processed strictly sequentially so at most one request is open
against the model endpoint, and so ``processing_id`` always names the one
document being worked on. A failing item never stops the run.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, FrozenSet, Iterable, Optional, Sequence, Tuple

from ..models.ai import BatchResult, TransformResult
from ..services.errors import InvalidInputError

logger = logging.getLogger(__name__)

DEFAULT_RESULT_TTL = 3.0

TransformFunc = Callable[[str, str, str], Awaitable[TransformResult]]


async def process_sequentially(
    document_ids: Sequence[str],
    config_id: str,
    prompt_id: str,
    transform: TransformFunc,
    *,
    on_item: Optional[Callable[[str], None]] = None,
) -> BatchResult:
    """Run ``transform`` over each id in order and count the outcomes."""
    success = 0
    fail = 0
    for document_id in document_ids:
        if on_item is not None:
            on_item(document_id)
        try:
            result = await transform(document_id, config_id, prompt_id)
        except Exception as exc:
            logger.warning("Batch item %s raised: %s", document_id, exc)
            fail += 1
            continue
        if result.ok:
            success += 1
        else:
            logger.info("Batch item %s failed: %s", document_id, result.message)
            fail += 1
    return BatchResult(total=len(document_ids), success=success, fail=fail)


class BatchProcessor:
    """Selection state and sequential execution for the document list."""

    def __init__(
        self,
        transform: TransformFunc,
        *,
        result_ttl: float = DEFAULT_RESULT_TTL,
        on_complete: Optional[Callable[[BatchResult], Awaitable[None]]] = None,
    ) -> None:
        self._transform = transform
        self.result_ttl = result_ttl
        self._on_complete = on_complete
        self._selection: Dict[str, None] = {}
        self._batch_mode = False
        self._running = False
        self.processing_id: Optional[str] = None
        self.result: Optional[BatchResult] = None
        self._clear_handle: Optional[asyncio.TimerHandle] = None

    @property
    def batch_mode(self) -> bool:
        return self._batch_mode

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def selected(self) -> FrozenSet[str]:
        return frozenset(self._selection)

    @property
    def selection_order(self) -> Tuple[str, ...]:
        return tuple(self._selection)

    def enter_batch_mode(self) -> None:
        self._batch_mode = True

    def exit_batch_mode(self) -> None:
        self._batch_mode = False
        self.clear_selection()

    def toggle(self, document_id: str) -> bool:
        """Flip selection of one document; returns whether it is now selected."""
        if not self._batch_mode:
            self.enter_batch_mode()
        if document_id in self._selection:
            del self._selection[document_id]
            return False
        self._selection[document_id] = None
        return True

    def select_all(self, document_ids: Iterable[str]) -> None:
        self.enter_batch_mode()
        for document_id in document_ids:
            self._selection.setdefault(document_id, None)

    def clear_selection(self) -> None:
        """Deselect everything while staying in batch mode."""
        self._selection.clear()

    async def run(self, config_id: str, prompt_id: str) -> BatchResult:
        """
        Process the current selection.

        Raises InvalidInputError before any call when nothing is selected or
        the config/prompt is missing, and RuntimeError if a run is active.
        """
        if self._running:
            raise RuntimeError("A batch is already running")
        if not self._selection:
            raise InvalidInputError("Select at least one document")
        if not config_id or not prompt_id:
            raise InvalidInputError("Choose a model config and a prompt")

        self._cancel_clear()
        self.result = None
        self._running = True
        document_ids = tuple(self._selection)
        logger.info("Starting batch of %d documents", len(document_ids))
        try:
            result = await process_sequentially(
                document_ids,
                config_id,
                prompt_id,
                self._transform,
                on_item=self._mark_processing,
            )
        finally:
            self._running = False
            self.processing_id = None

        self.result = result
        logger.info(
            "Batch finished: %d total, %d succeeded, %d failed",
            result.total,
            result.success,
            result.fail,
        )
        self._schedule_clear()
        if self._on_complete is not None:
            await self._on_complete(result)
        return result

    def _mark_processing(self, document_id: str) -> None:
        self.processing_id = document_id

    def _schedule_clear(self) -> None:
        loop = asyncio.get_running_loop()
        self._clear_handle = loop.call_later(self.result_ttl, self.dismiss_result)

    def _cancel_clear(self) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
            self._clear_handle = None

    def dismiss_result(self) -> None:
        """Hide the summary and leave batch mode."""
        self._cancel_clear()
        self.result = None
        self.exit_batch_mode()


__all__ = ["BatchProcessor", "process_sequentially", "DEFAULT_RESULT_TTL"]
