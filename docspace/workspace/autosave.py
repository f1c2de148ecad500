"""Debounced autosave for the document editor.

States::

    clean --edit--> dirty_pending --timer--> saving --ok--> clean
                        ^   |                   |
                        +---+ (edit restarts)   +--fail--> dirty

Edits made while a save is in flight are kept and re-arm the timer; the
next save goes out once the current one has finished.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from ..models.document import Document
from .debounce import Debouncer
from .interfaces import DocumentBackend

logger = logging.getLogger(__name__)

DEFAULT_AUTOSAVE_DELAY = 1.5


class AutosaveState(str, Enum):
    CLEAN = "clean"
    DIRTY_PENDING = "dirty_pending"
    SAVING = "saving"
    DIRTY = "dirty"


@dataclass(frozen=True)
class EditableFields:
    title: str
    content: str

    def diff(self, other: "EditableFields") -> Dict[str, str]:
        """Fields of ``self`` that differ from ``other``."""
        changes: Dict[str, str] = {}
        # A blank title is held back until it is filled in; documents always have one.
        if self.title != other.title and self.title.strip():
            changes["title"] = self.title
        if self.content != other.content:
            changes["content"] = self.content
        return changes


class AutosaveController:
    """Persist title/content edits after a quiet period."""

    def __init__(
        self,
        document: Document,
        backend: DocumentBackend,
        *,
        delay: float = DEFAULT_AUTOSAVE_DELAY,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> None:
        self.document_id = document.id
        self.backend = backend
        self._current = EditableFields(document.title or "", document.content or "")
        self._persisted = self._current
        self._on_error = on_error
        self._save_lock = asyncio.Lock()
        self._saving = False
        self._closed = False
        self.last_error: Optional[BaseException] = None
        self._timer = Debouncer(delay, self._save, name=f"autosave-{document.id}")

    @property
    def title(self) -> str:
        return self._current.title

    @property
    def content(self) -> str:
        return self._current.content

    @property
    def persisted(self) -> EditableFields:
        return self._persisted

    @property
    def is_saving(self) -> bool:
        return self._saving

    @property
    def has_unsaved_changes(self) -> bool:
        return self._current != self._persisted

    @property
    def state(self) -> AutosaveState:
        if self._saving:
            return AutosaveState.SAVING
        if not self.has_unsaved_changes:
            return AutosaveState.CLEAN
        if self._timer.pending:
            return AutosaveState.DIRTY_PENDING
        return AutosaveState.DIRTY

    def edit(self, *, title: Optional[str] = None, content: Optional[str] = None) -> AutosaveState:
        """Record a keystroke-level change and (re)start the inactivity timer."""
        if self._closed:
            raise RuntimeError("Editor session is closed")
        self._current = EditableFields(
            title if title is not None else self._current.title,
            content if content is not None else self._current.content,
        )
        if self.has_unsaved_changes:
            self._timer.trigger()
        else:
            self._timer.cancel()
        return self.state

    async def _save(self) -> None:
        async with self._save_lock:
            changes = self._current.diff(self._persisted)
            if not changes:
                return
            snapshot = EditableFields(
                changes.get("title", self._persisted.title),
                changes.get("content", self._persisted.content),
            )
            self._saving = True
            try:
                await self.backend.update_document(self.document_id, **changes)
            except Exception as exc:
                self.last_error = exc
                logger.warning("Autosave of document %s failed: %s", self.document_id, exc)
                if self._on_error is not None:
                    self._on_error(exc)
                return
            finally:
                self._saving = False
            self._persisted = snapshot
            self.last_error = None
            logger.debug("Autosaved document %s fields %s", self.document_id, sorted(changes))

    async def save_now(self) -> None:
        """Cancel the timer and save immediately."""
        if self._timer.pending:
            await self._timer.flush()
        else:
            await self._save()

    async def wait_idle(self) -> None:
        await self._timer.wait_idle()
        async with self._save_lock:
            pass

    async def close(self, *, flush: bool = True) -> None:
        """
        End the editing session (navigation away).

        With ``flush`` the unsaved changes are written before returning;
        otherwise the pending timer is simply cancelled.
        """
        self._timer.cancel()
        if flush and self.has_unsaved_changes:
            await self._save()
        else:
            await self.wait_idle()
        self._closed = True


__all__ = ["AutosaveController", "AutosaveState", "EditableFields", "DEFAULT_AUTOSAVE_DELAY"]
