"""Service for folder records."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import List, Optional
import uuid

from ..models.folder import Folder
from .database import DatabaseService, utcnow_iso
from .errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


def _row_to_folder(row: sqlite3.Row) -> Folder:
    return Folder(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        parent_id=row["parent_id"],
        created=datetime.fromisoformat(row["created"]),
    )


class FolderService:
    """Per-user folder CRUD over SQLite."""

    def __init__(self, db_service: Optional[DatabaseService] = None):
        self.db = db_service or DatabaseService()

    def list_folders(self, user_id: str) -> List[Folder]:
        """Return the user's folders as a flat list, ordered by name."""
        conn = self.db.connect()
        try:
            rows = conn.execute(
                "SELECT * FROM folders WHERE user_id = ? ORDER BY name COLLATE NOCASE",
                (user_id,),
            ).fetchall()
            return [_row_to_folder(row) for row in rows]
        finally:
            conn.close()

    def list_all_folders(self) -> List[Folder]:
        """Every folder regardless of owner (ingestion endpoint only)."""
        conn = self.db.connect()
        try:
            rows = conn.execute("SELECT * FROM folders ORDER BY name COLLATE NOCASE").fetchall()
            return [_row_to_folder(row) for row in rows]
        finally:
            conn.close()

    def get_folder(self, folder_id: str, user_id: Optional[str] = None) -> Folder:
        """
        Fetch a folder by ID.

        When ``user_id`` is given the folder must belong to that user.
        Raises NotFoundError otherwise.
        """
        conn = self.db.connect()
        try:
            if user_id is None:
                row = conn.execute("SELECT * FROM folders WHERE id = ?", (folder_id,)).fetchone()
            else:
                row = conn.execute(
                    "SELECT * FROM folders WHERE id = ? AND user_id = ?",
                    (folder_id, user_id),
                ).fetchone()
        finally:
            conn.close()
        if row is None:
            raise NotFoundError(f"Folder not found: {folder_id}", error="folder_not_found")
        return _row_to_folder(row)

    def create_folder(
        self,
        user_id: str,
        name: str,
        parent_id: Optional[str] = None,
        *,
        folder_id: Optional[str] = None,
    ) -> Folder:
        """Create a folder; the parent, when given, must belong to the same user."""
        cleaned = (name or "").strip()
        if not cleaned:
            raise InvalidInputError("Folder name must not be blank")
        if parent_id:
            try:
                self.get_folder(parent_id, user_id)
            except NotFoundError as exc:
                raise InvalidInputError(
                    f"Parent folder does not exist: {parent_id}", error="parent_not_found"
                ) from exc

        folder = Folder(
            id=folder_id or str(uuid.uuid4()),
            user_id=user_id,
            name=cleaned,
            parent_id=parent_id or None,
            created=datetime.fromisoformat(utcnow_iso()),
        )
        conn = self.db.connect()
        try:
            with conn:
                conn.execute(
                    "INSERT INTO folders (id, user_id, name, parent_id, created) VALUES (?, ?, ?, ?, ?)",
                    (folder.id, user_id, folder.name, folder.parent_id, folder.created.isoformat()),
                )
        except sqlite3.IntegrityError as exc:
            raise InvalidInputError(f"Folder already exists: {folder.id}") from exc
        finally:
            conn.close()
        logger.info("Created folder %s for user %s", folder.id, user_id)
        return folder

    def delete_folder(self, user_id: str, folder_id: str) -> None:
        """Delete a folder; subfolders and documents go with it."""
        conn = self.db.connect()
        try:
            with conn:
                cursor = conn.execute(
                    "DELETE FROM folders WHERE id = ? AND user_id = ?",
                    (folder_id, user_id),
                )
        finally:
            conn.close()
        if cursor.rowcount == 0:
            raise NotFoundError(f"Folder not found: {folder_id}", error="folder_not_found")
        logger.info("Deleted folder %s for user %s", folder_id, user_id)


__all__ = ["FolderService"]
