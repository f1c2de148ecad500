"""Workspace collaborators backed by the local SQLite services."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..models.ai import AiSettings
from ..models.document import Document
from ..models.folder import Folder
from ..models.user import User, UserRole
from ..workspace.interfaces import (
    AiSettingsProvider,
    DocumentBackend,
    FolderBackend,
    SessionBackend,
)
from .database import DatabaseService
from .documents import DocumentService
from .errors import NotFoundError
from .folders import FolderService
from .users import UserService

logger = logging.getLogger(__name__)


class LocalBackend(SessionBackend, FolderBackend, DocumentBackend, AiSettingsProvider):
    """All workspace collaborators for one user, served from SQLite."""

    def __init__(
        self,
        user_id: str,
        *,
        db_service: Optional[DatabaseService] = None,
        users: Optional[UserService] = None,
    ) -> None:
        db = db_service or DatabaseService()
        self.user_id = user_id
        self.folders = FolderService(db)
        self.documents = DocumentService(db)
        self.users = users or UserService(db)
        self.signed_in = True

    # Session

    async def get_current_user(self) -> Optional[User]:
        if not self.signed_in:
            return None
        user = self.users.ensure_user(self.user_id)
        if self.users.is_admin(user) and user.role is not UserRole.ADMIN:
            user = user.model_copy(update={"metadata": {**user.metadata, "role": UserRole.ADMIN.value}})
        return user

    async def update_user_profile(self, **fields: Any) -> User:
        return self.users.update_profile(self.user_id, **fields)

    async def sign_out(self) -> None:
        logger.info("User %s signed out", self.user_id)
        self.signed_in = False

    # Folders

    async def list_folders(self) -> List[Folder]:
        return self.folders.list_folders(self.user_id)

    async def create_folder(
        self, name: str, parent_id: Optional[str] = None, *, folder_id: Optional[str] = None
    ) -> Folder:
        return self.folders.create_folder(self.user_id, name, parent_id, folder_id=folder_id)

    async def delete_folder(self, folder_id: str) -> None:
        try:
            self.folders.delete_folder(self.user_id, folder_id)
        except NotFoundError:
            logger.debug("Folder %s already gone", folder_id)

    # Documents

    async def list_documents(self, folder_id: str) -> List[Document]:
        return self.documents.list_documents(self.user_id, folder_id)

    async def get_document(self, document_id: str) -> Optional[Document]:
        try:
            return self.documents.get_document(self.user_id, document_id)
        except NotFoundError:
            return None

    async def create_document(
        self,
        title: str,
        folder_id: str,
        content: str = "",
        *,
        document_id: Optional[str] = None,
    ) -> Document:
        return self.documents.create_document(
            self.user_id, title, folder_id, content, document_id=document_id
        )

    async def update_document(
        self, document_id: str, *, title: Optional[str] = None, content: Optional[str] = None
    ) -> Document:
        return self.documents.update_document(
            self.user_id, document_id, title=title, content=content
        )

    async def delete_document(self, document_id: str) -> None:
        try:
            self.documents.delete_document(self.user_id, document_id)
        except NotFoundError:
            logger.debug("Document %s already gone", document_id)

    async def search_documents(
        self, query: str, folder_id: Optional[str] = None
    ) -> List[Document]:
        return self.documents.search_documents(self.user_id, query, folder_id)

    # AI settings

    async def get_ai_settings(self) -> AiSettings:
        return self.users.resolve_ai_settings(self.user_id)


__all__ = ["LocalBackend"]
