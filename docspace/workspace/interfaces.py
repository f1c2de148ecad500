"""Collaborator contracts consumed by the workspace core.

The workspace never talks to a concrete store or SDK; it is handed objects
implementing these interfaces. ``docspace.services.local_backend`` provides
the SQLite-backed implementation used by the HTTP API and the tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from ..models.ai import AiSettings
from ..models.document import Document
from ..models.folder import Folder
from ..models.user import User


class SessionBackend(ABC):
    @abstractmethod
    async def get_current_user(self) -> Optional[User]: ...

    @abstractmethod
    async def update_user_profile(self, **fields: Any) -> User: ...

    @abstractmethod
    async def sign_out(self) -> None: ...


class FolderBackend(ABC):
    @abstractmethod
    async def list_folders(self) -> List[Folder]: ...

    @abstractmethod
    async def create_folder(
        self, name: str, parent_id: Optional[str] = None, *, folder_id: Optional[str] = None
    ) -> Folder: ...

    @abstractmethod
    async def delete_folder(self, folder_id: str) -> None: ...


class DocumentBackend(ABC):
    @abstractmethod
    async def list_documents(self, folder_id: str) -> List[Document]: ...

    @abstractmethod
    async def get_document(self, document_id: str) -> Optional[Document]:
        """Return the document or None when it does not exist."""

    @abstractmethod
    async def create_document(
        self,
        title: str,
        folder_id: str,
        content: str = "",
        *,
        document_id: Optional[str] = None,
    ) -> Document: ...

    @abstractmethod
    async def update_document(
        self, document_id: str, *, title: Optional[str] = None, content: Optional[str] = None
    ) -> Document: ...

    @abstractmethod
    async def delete_document(self, document_id: str) -> None: ...

    @abstractmethod
    async def search_documents(
        self, query: str, folder_id: Optional[str] = None
    ) -> List[Document]: ...


class ModelInvocationError(Exception):
    """Base class for failures talking to the model endpoint."""


class ModelHTTPError(ModelInvocationError):
    """The endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Model endpoint returned HTTP {status_code}")


class ModelResponseError(ModelInvocationError):
    """The endpoint answered 2xx but the payload is not a usable completion."""


class ModelUnavailableError(ModelInvocationError):
    """Connection failure or timeout."""


class ModelInvoker(ABC):
    @abstractmethod
    async def invoke(
        self,
        base_url: str,
        api_key: str,
        model: str,
        system_prompt: str,
        user_content: str,
    ) -> str:
        """Return the completion text or raise ModelInvocationError."""


class AiSettingsProvider(ABC):
    @abstractmethod
    async def get_ai_settings(self) -> AiSettings:
        """Effective AI settings of the signed-in user (shared fallback applied)."""


__all__ = [
    "SessionBackend",
    "FolderBackend",
    "DocumentBackend",
    "ModelInvoker",
    "ModelInvocationError",
    "ModelHTTPError",
    "ModelResponseError",
    "ModelUnavailableError",
    "AiSettingsProvider",
]
