"""Shared fixtures: isolated configuration and an in-memory workspace backend."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import uuid

import pytest

from docspace.models.ai import AiSettings
from docspace.models.document import Document
from docspace.models.folder import Folder
from docspace.models.user import User
from docspace.services import config as config_module
from docspace.services.database import DatabaseService
from docspace.workspace.interfaces import (
    AiSettingsProvider,
    DocumentBackend,
    FolderBackend,
    SessionBackend,
)

TEST_SECRET = "test-secret-key-0123456789"

MANAGED_ENV = (
    "JWT_SECRET_KEY",
    "ENABLE_LOCAL_MODE",
    "LOCAL_DEV_TOKEN",
    "API_SECRET",
    "DATABASE_PATH",
    "DEFAULT_EMAIL",
    "SHARED_AI_USER",
    "AUTOSAVE_DELAY_SECONDS",
    "SEARCH_DELAY_SECONDS",
    "BATCH_RESULT_TTL_SECONDS",
    "MODEL_TIMEOUT_SECONDS",
    "ENVIRONMENT",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path: Path):
    """Every test gets its own database file and a known environment."""
    for key in MANAGED_ENV:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "docspace.db"))
    monkeypatch.setenv("JWT_SECRET_KEY", TEST_SECRET)
    config_module.reload_config()
    yield
    config_module.get_config.cache_clear()


@pytest.fixture
def db_service(tmp_path: Path) -> DatabaseService:
    service = DatabaseService(tmp_path / "services.db")
    service.initialize()
    return service


class MemoryBackend(SessionBackend, FolderBackend, DocumentBackend, AiSettingsProvider):
    """Dict-backed collaborators with hooks for failures and slow calls."""

    def __init__(self, user: Optional[User] = None) -> None:
        self.user = user or User(user_id="alice", email="alice@example.com")
        self.folders: Dict[str, Folder] = {}
        self.documents: Dict[str, Document] = {}
        self.ai_settings = AiSettings()
        self.calls: List[tuple] = []
        self.fail: Dict[str, Exception] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.search_delays: Dict[str, float] = {}
        self.search_failures: Dict[str, Exception] = {}
        self.signed_in = True

    async def _enter(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        if name in self.fail:
            raise self.fail[name]

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    async def get_current_user(self) -> Optional[User]:
        return self.user if self.signed_in else None

    async def update_user_profile(self, **fields: Any) -> User:
        await self._enter("update_user_profile", fields)
        self.user = self.user.model_copy(update={"metadata": {**self.user.metadata, **fields}})
        return self.user

    async def sign_out(self) -> None:
        self.signed_in = False

    async def list_folders(self) -> List[Folder]:
        await self._enter("list_folders")
        return list(self.folders.values())

    async def create_folder(
        self, name: str, parent_id: Optional[str] = None, *, folder_id: Optional[str] = None
    ) -> Folder:
        await self._enter("create_folder", name, parent_id)
        folder = Folder(id=folder_id or str(uuid.uuid4()), name=name, parent_id=parent_id)
        self.folders[folder.id] = folder
        return folder

    async def delete_folder(self, folder_id: str) -> None:
        await self._enter("delete_folder", folder_id)
        doomed = {folder_id}
        while True:
            children = {f.id for f in self.folders.values() if f.parent_id in doomed} - doomed
            if not children:
                break
            doomed |= children
        for gone in doomed:
            self.folders.pop(gone, None)

    async def list_documents(self, folder_id: str) -> List[Document]:
        await self._enter("list_documents", folder_id)
        docs = [d for d in self.documents.values() if d.folder_id == folder_id]
        return sorted(docs, key=lambda d: d.updated_at, reverse=True)

    async def get_document(self, document_id: str) -> Optional[Document]:
        await self._enter("get_document", document_id)
        return self.documents.get(document_id)

    async def create_document(
        self,
        title: str,
        folder_id: str,
        content: str = "",
        *,
        document_id: Optional[str] = None,
    ) -> Document:
        await self._enter("create_document", title, folder_id, content)
        now = datetime.now(timezone.utc)
        document = Document(
            id=document_id or str(uuid.uuid4()),
            folder_id=folder_id,
            title=title,
            content=content,
            created=now,
            updated_at=now,
        )
        self.documents[document.id] = document
        return document

    async def update_document(
        self, document_id: str, *, title: Optional[str] = None, content: Optional[str] = None
    ) -> Document:
        changes = {k: v for k, v in (("title", title), ("content", content)) if v is not None}
        await self._enter("update_document", document_id, changes)
        document = self.documents[document_id].model_copy(
            update={**changes, "updated_at": datetime.now(timezone.utc)}
        )
        self.documents[document_id] = document
        return document

    async def delete_document(self, document_id: str) -> None:
        await self._enter("delete_document", document_id)
        self.documents.pop(document_id, None)

    async def search_documents(
        self, query: str, folder_id: Optional[str] = None
    ) -> List[Document]:
        await self._enter("search_documents", query, folder_id)
        delay = self.search_delays.get(query)
        if delay:
            await asyncio.sleep(delay)
        if query in self.search_failures:
            raise self.search_failures[query]
        needle = query.lower()
        return [
            d
            for d in self.documents.values()
            if needle in d.title.lower() and (folder_id is None or d.folder_id == folder_id)
        ]

    async def get_ai_settings(self) -> AiSettings:
        await self._enter("get_ai_settings")
        return self.ai_settings

    def seed_document(self, title: str, folder_id: str = "f1", content: str = "") -> Document:
        now = datetime.now(timezone.utc)
        document = Document(
            id=str(uuid.uuid4()),
            folder_id=folder_id,
            title=title,
            content=content,
            created=now,
            updated_at=now,
        )
        self.documents[document.id] = document
        return document


@pytest.fixture
def memory_backend() -> MemoryBackend:
    return MemoryBackend()
