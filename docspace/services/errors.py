"""Domain errors raised by the service layer."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class ServiceError(Exception):
    """Base error carrying a machine code, a message and an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        error: Optional[str] = None,
        detail: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error
        self.detail = detail or {}


class InvalidInputError(ServiceError):
    """Rejected before any write (empty name, unknown parent, ...)."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "forbidden"


__all__ = ["ServiceError", "InvalidInputError", "NotFoundError", "ForbiddenError"]
