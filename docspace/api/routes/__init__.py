"""HTTP API route handlers."""

from . import admin, ai, documents, folders, me, search, system, upload

__all__ = ["admin", "ai", "documents", "folders", "me", "search", "system", "upload"]
