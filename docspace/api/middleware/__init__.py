"""FastAPI middleware for authentication and error handling."""

from .auth_middleware import AuthContext, get_auth_context, require_admin
from .error_handlers import (
    auth_exception_handler,
    http_exception_handler,
    internal_exception_handler,
    register_error_handlers,
    service_exception_handler,
    validation_exception_handler,
)

__all__ = [
    "AuthContext",
    "get_auth_context",
    "require_admin",
    "register_error_handlers",
    "validation_exception_handler",
    "http_exception_handler",
    "service_exception_handler",
    "auth_exception_handler",
    "internal_exception_handler",
]
