"""Debounced document search with folder/all scope switching."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple

from ..models.document import Document
from .debounce import Debouncer
from .interfaces import DocumentBackend
from .optimistic import OptimisticStore

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_DELAY = 0.3


class SearchScope(str, Enum):
    CURRENT_FOLDER = "current"
    ALL_FOLDERS = "all"


class SearchController:
    """
    Debounce query/scope input into backend searches.

    While the query is blank the controller shows the optimistic store's
    ``displayed`` collection; otherwise it shows the latest applied search
    result. Every fired search takes a sequence number and a response is
    only applied if no newer search has been fired since.
    """

    def __init__(
        self,
        backend: DocumentBackend,
        store: OptimisticStore[Document],
        folder_id: Optional[str],
        *,
        delay: float = DEFAULT_SEARCH_DELAY,
        scope: SearchScope = SearchScope.CURRENT_FOLDER,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> None:
        self.backend = backend
        self.store = store
        self.folder_id = folder_id
        self._query = ""
        self._scope = SearchScope(scope)
        self._results: Optional[Tuple[Document, ...]] = None
        self._issued = 0
        self._applied = 0
        self._on_error = on_error
        self.last_error: Optional[BaseException] = None
        self.in_flight = 0
        self._timer = Debouncer(delay, self._fire, name="search")

    @property
    def query(self) -> str:
        return self._query

    @property
    def scope(self) -> SearchScope:
        return self._scope

    @property
    def is_searching(self) -> bool:
        return self._results is not None

    @property
    def displayed(self) -> Tuple[Document, ...]:
        if self._results is None:
            return self.store.displayed
        return self._results

    def set_query(self, query: str) -> None:
        self._query = query
        self._timer.trigger()

    def set_scope(self, scope: SearchScope | str) -> None:
        self._scope = SearchScope(scope)
        self._timer.trigger()

    def _resolve_folder(self) -> Optional[str]:
        if self._scope is SearchScope.ALL_FOLDERS:
            return None
        return self.folder_id

    async def _fire(self) -> None:
        self._issued += 1
        sequence = self._issued
        query = self._query.strip()

        if not query:
            self._apply(sequence, None)
            return

        self.in_flight += 1
        try:
            results: Sequence[Document] = await self.backend.search_documents(
                query, self._resolve_folder()
            )
        except Exception as exc:
            if self._is_stale(sequence):
                logger.debug("Ignoring failure of stale search #%d: %s", sequence, exc)
                return
            self.last_error = exc
            logger.warning("Search for %r failed: %s", query, exc)
            if self._on_error is not None:
                self._on_error(exc)
            return
        finally:
            self.in_flight -= 1
        self._apply(sequence, tuple(results))

    def _is_stale(self, sequence: int) -> bool:
        return sequence < self._issued or sequence < self._applied

    def _apply(self, sequence: int, results: Optional[Tuple[Document, ...]]) -> None:
        if self._is_stale(sequence):
            logger.debug("Dropping stale search response #%d (latest #%d)", sequence, self._issued)
            return
        self._applied = sequence
        self._results = results
        self.last_error = None

    def clear(self) -> None:
        """Reset to the folder listing immediately, without waiting for the timer."""
        self._timer.cancel()
        self._query = ""
        self._issued += 1
        self._apply(self._issued, None)

    async def wait_idle(self) -> None:
        await self._timer.wait_idle()


__all__ = ["SearchController", "SearchScope", "DEFAULT_SEARCH_DELAY"]
