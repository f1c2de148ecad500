"""SQLite database helpers for the workspace schema."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
import sqlite3
from typing import Iterable

from .config import get_config

DDL_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id TEXT PRIMARY KEY,
        email TEXT UNIQUE,
        metadata TEXT NOT NULL DEFAULT '{}',
        created TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS folders (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        parent_id TEXT REFERENCES folders(id) ON DELETE CASCADE,
        created TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_folders_user ON folders(user_id, name)",
    "CREATE INDEX IF NOT EXISTS idx_folders_parent ON folders(parent_id)",
    """
    CREATE TABLE IF NOT EXISTS documents (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        folder_id TEXT NOT NULL REFERENCES folders(id) ON DELETE CASCADE,
        title TEXT NOT NULL,
        content TEXT NOT NULL DEFAULT '',
        created TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_documents_folder ON documents(user_id, folder_id, updated_at DESC)",
    "CREATE INDEX IF NOT EXISTS idx_documents_updated ON documents(user_id, updated_at DESC)",
)


def utcnow_iso() -> str:
    """Timestamp with microseconds so rapid updates still order correctly."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _casefold(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


class DatabaseService:
    """Manage SQLite connections and schema initialization."""

    def __init__(self, db_path: str | Path | None = None):
        self.db_path = Path(db_path) if db_path else get_config().database_path

    def _ensure_directory(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> sqlite3.Connection:
        """Return a sqlite3 connection with foreign keys enforced."""
        self._ensure_directory()
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        # SQLite folds case for ASCII only
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        return conn

    def initialize(self, statements: Iterable[str] | None = None) -> Path:
        """Create all schema artifacts required by the workspace."""
        conn = self.connect()
        try:
            with conn:  # Transactional apply of DDL
                for statement in statements or DDL_STATEMENTS:
                    conn.execute(statement)
        finally:
            conn.close()
        return self.db_path

    def ping(self) -> bool:
        """Run a trivial query; used by the keep-alive endpoint."""
        conn = self.connect()
        try:
            conn.execute("SELECT id FROM folders LIMIT 1").fetchall()
            return True
        finally:
            conn.close()


def init_database(db_path: str | Path | None = None) -> Path:
    """Convenience wrapper used at application startup."""
    return DatabaseService(db_path).initialize()


__all__ = ["DatabaseService", "init_database", "utcnow_iso"]
