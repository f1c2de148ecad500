"""Explicit per-user context that wires the workspace views together.

Everything a view needs (signed-in user, collaborators, timings) is carried
by a ``WorkspaceSession`` instance instead of module-level state, so two
sessions in one process never see each other's data.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..models.ai import TransformResult
from ..models.user import User, UserRole
from ..services.auth import AuthError
from ..services.config import get_config
from ..services.errors import ForbiddenError
from .document_list import DocumentListView
from .editor import DocumentEditor
from .interfaces import DocumentBackend, FolderBackend, SessionBackend
from .notices import NoticeBoard
from .sidebar import FolderSidebar
from .transform import DocumentTransformer

logger = logging.getLogger(__name__)


class WorkspaceSession:
    def __init__(
        self,
        session: SessionBackend,
        folders: FolderBackend,
        documents: DocumentBackend,
        transformer: DocumentTransformer,
        *,
        autosave_delay: Optional[float] = None,
        search_delay: Optional[float] = None,
        result_ttl: Optional[float] = None,
    ) -> None:
        config = get_config()
        self.session = session
        self.folders = folders
        self.documents = documents
        self.transformer = transformer
        self.autosave_delay = config.autosave_delay_seconds if autosave_delay is None else autosave_delay
        self.search_delay = config.search_delay_seconds if search_delay is None else search_delay
        self.result_ttl = config.batch_result_ttl_seconds if result_ttl is None else result_ttl
        self.notices = NoticeBoard()
        self._user: Optional[User] = None

    @property
    def user(self) -> User:
        return self._require_user()

    def _require_user(self) -> User:
        if self._user is None:
            raise AuthError("not_signed_in", "Sign in required")
        return self._user

    @property
    def is_admin(self) -> bool:
        return self._user is not None and self._user.role is UserRole.ADMIN

    async def start(self) -> User:
        """Resolve the signed-in user; raises AuthError when there is none."""
        user = await self.session.get_current_user()
        if user is None:
            raise AuthError("not_signed_in", "Sign in required")
        self._user = user
        logger.info("Workspace session started for %s", user.user_id)
        return user

    def require_admin(self) -> User:
        user = self.user
        if not self.is_admin:
            raise ForbiddenError("Administrator role required")
        return user

    async def transform(self, document_id: str, config_id: str, prompt_id: str) -> TransformResult:
        self._require_user()
        return await self.transformer.transform(document_id, config_id, prompt_id)

    async def open_sidebar(self) -> FolderSidebar:
        self._require_user()
        sidebar = FolderSidebar(self.folders, self.notices)
        await sidebar.reload()
        return sidebar

    async def open_folder(self, folder_id: str) -> DocumentListView:
        self._require_user()
        view = DocumentListView(
            self.documents,
            folder_id,
            self.transform,
            notices=self.notices,
            search_delay=self.search_delay,
            result_ttl=self.result_ttl,
        )
        await view.reload()
        return view

    async def open_editor(self, document_id: str) -> Optional[DocumentEditor]:
        self._require_user()
        try:
            document = await self.documents.get_document(document_id)
        except Exception as exc:
            logger.warning("Failed to open document %s: %s", document_id, exc)
            self.notices.error(f"Failed to open document: {exc}")
            return None
        if document is None:
            self.notices.error("Document not found")
            return None
        return DocumentEditor(
            document,
            self.documents,
            self.transform,
            notices=self.notices,
            autosave_delay=self.autosave_delay,
        )

    async def update_profile(self, **fields: Any) -> Optional[User]:
        self._require_user()
        try:
            self._user = await self.session.update_user_profile(**fields)
        except Exception as exc:
            logger.warning("Profile update failed: %s", exc)
            self.notices.error(f"Failed to save settings: {exc}")
            return None
        self.notices.success("Settings updated")
        return self._user

    async def sign_out(self) -> None:
        await self.session.sign_out()
        self._user = None


__all__ = ["WorkspaceSession"]
