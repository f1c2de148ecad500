"""Service layer for persistence, authentication and model access."""

from .errors import ForbiddenError, InvalidInputError, NotFoundError, ServiceError
from .auth import AuthError, AuthService
from .config import AppConfig, get_config, reload_config
from .database import DatabaseService, init_database
from .documents import DocumentService, escape_like
from .folders import FolderService
from .users import UserService, get_user_service
from .model_client import ModelClient
from .local_backend import LocalBackend

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "DatabaseService",
    "init_database",
    "AuthService",
    "AuthError",
    "ServiceError",
    "InvalidInputError",
    "NotFoundError",
    "ForbiddenError",
    "FolderService",
    "DocumentService",
    "escape_like",
    "UserService",
    "get_user_service",
    "ModelClient",
    "LocalBackend",
]
