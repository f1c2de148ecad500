"""Editor view: autosaving fields plus the interactive AI action."""

from __future__ import annotations

import logging
from typing import Optional

from ..models.ai import TransformResult
from ..models.document import Document
from .autosave import DEFAULT_AUTOSAVE_DELAY, AutosaveController, AutosaveState
from .batch import TransformFunc
from .interfaces import DocumentBackend
from .notices import NoticeBoard

logger = logging.getLogger(__name__)


class DocumentEditor:
    def __init__(
        self,
        document: Document,
        backend: DocumentBackend,
        transform: TransformFunc,
        *,
        notices: Optional[NoticeBoard] = None,
        autosave_delay: float = DEFAULT_AUTOSAVE_DELAY,
    ) -> None:
        self.document = document
        self.notices = notices or NoticeBoard()
        self._transform = transform
        self.autosave = AutosaveController(
            document,
            backend,
            delay=autosave_delay,
            on_error=lambda exc: self.notices.error(f"Autosave failed, changes not saved: {exc}"),
        )
        self.transforming = False

    @property
    def folder_id(self) -> str:
        return self.document.folder_id

    @property
    def state(self) -> AutosaveState:
        return self.autosave.state

    def set_title(self, title: str) -> AutosaveState:
        return self.autosave.edit(title=title)

    def set_content(self, content: str) -> AutosaveState:
        return self.autosave.edit(content=content)

    async def transform(self, config_id: str, prompt_id: str) -> TransformResult:
        """
        Run the AI action on this document.

        Unsaved edits are flushed first so the model sees what is on screen.
        """
        if self.autosave.has_unsaved_changes:
            await self.autosave.save_now()
        self.transforming = True
        try:
            result = await self._transform(self.document.id, config_id, prompt_id)
        except Exception as exc:
            logger.exception("AI action on %s raised", self.document.id)
            result = TransformResult(ok=False, message=str(exc))
        finally:
            self.transforming = False
        if result.ok:
            self.notices.success(f"Created '{result.title}'")
        else:
            self.notices.error(f"AI processing failed: {result.message}")
        return result

    async def close(self, *, flush: bool = True) -> None:
        await self.autosave.close(flush=flush)


__all__ = ["DocumentEditor"]
