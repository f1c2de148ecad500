"""Per-request service construction, overridable in tests."""

from __future__ import annotations

from fastapi import Depends

from ..services.config import get_config
from ..services.documents import DocumentService
from ..services.folders import FolderService
from ..services.local_backend import LocalBackend
from ..services.model_client import ModelClient
from ..services.users import UserService
from ..workspace.interfaces import ModelInvoker
from ..workspace.transform import DocumentTransformer
from .middleware import AuthContext, get_auth_context


def get_folder_service() -> FolderService:
    return FolderService()


def get_document_service() -> DocumentService:
    return DocumentService()


def get_users() -> UserService:
    return UserService()


def get_model_invoker() -> ModelInvoker:
    return ModelClient(timeout=get_config().model_timeout_seconds)


def get_backend(auth: AuthContext = Depends(get_auth_context)) -> LocalBackend:
    """Workspace collaborators scoped to the caller."""
    return LocalBackend(auth.user_id)


def get_transformer(
    backend: LocalBackend = Depends(get_backend),
    invoker: ModelInvoker = Depends(get_model_invoker),
) -> DocumentTransformer:
    return DocumentTransformer(backend, invoker, backend)


__all__ = [
    "get_folder_service",
    "get_document_service",
    "get_users",
    "get_model_invoker",
    "get_backend",
    "get_transformer",
]
