"""Service for Markdown documents."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Dict, List, Optional
import uuid

from ..models.document import MAX_CONTENT_BYTES, Document
from .database import DatabaseService, utcnow_iso
from .errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def _row_to_document(row: sqlite3.Row) -> Document:
    return Document(
        id=row["id"],
        user_id=row["user_id"],
        folder_id=row["folder_id"],
        title=row["title"],
        content=row["content"],
        created=datetime.fromisoformat(row["created"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _validate_content(content: str) -> None:
    if len(content.encode("utf-8")) > MAX_CONTENT_BYTES:
        raise InvalidInputError("Document exceeds 1 MiB limit", error="payload_too_large")


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class DocumentService:
    """Per-user document CRUD and title search over SQLite."""

    def __init__(self, db_service: Optional[DatabaseService] = None):
        self.db = db_service or DatabaseService()

    def _folder_owner(self, conn: sqlite3.Connection, folder_id: str) -> Optional[str]:
        row = conn.execute("SELECT user_id FROM folders WHERE id = ?", (folder_id,)).fetchone()
        return row["user_id"] if row else None

    def list_documents(self, user_id: str, folder_id: str) -> List[Document]:
        """Documents of one folder, most recently updated first."""
        conn = self.db.connect()
        try:
            rows = conn.execute(
                """
                SELECT * FROM documents
                WHERE user_id = ? AND folder_id = ?
                ORDER BY updated_at DESC
                """,
                (user_id, folder_id),
            ).fetchall()
            return [_row_to_document(row) for row in rows]
        finally:
            conn.close()

    def get_document(self, user_id: str, document_id: str) -> Document:
        conn = self.db.connect()
        try:
            row = conn.execute(
                "SELECT * FROM documents WHERE id = ? AND user_id = ?",
                (document_id, user_id),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            raise NotFoundError(f"Document not found: {document_id}", error="document_not_found")
        return _row_to_document(row)

    def create_document(
        self,
        user_id: Optional[str],
        title: str,
        folder_id: str,
        content: str = "",
        *,
        document_id: Optional[str] = None,
    ) -> Document:
        """
        Create a document inside an existing folder.

        With ``user_id=None`` the document inherits the folder's owner (used by
        the ingestion endpoint). Otherwise the folder must belong to ``user_id``.
        """
        cleaned = (title or "").strip()
        if not cleaned:
            raise InvalidInputError("Document title must not be blank")
        content = content or ""
        _validate_content(content)

        conn = self.db.connect()
        try:
            owner = self._folder_owner(conn, folder_id)
            if owner is None or (user_id is not None and owner != user_id):
                raise NotFoundError(f"Folder not found: {folder_id}", error="folder_not_found")

            now = utcnow_iso()
            document = Document(
                id=document_id or str(uuid.uuid4()),
                user_id=owner,
                folder_id=folder_id,
                title=cleaned,
                content=content,
                created=datetime.fromisoformat(now),
                updated_at=datetime.fromisoformat(now),
            )
            with conn:
                conn.execute(
                    """
                    INSERT INTO documents (id, user_id, folder_id, title, content, created, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (document.id, owner, folder_id, document.title, content, now, now),
                )
        except sqlite3.IntegrityError as exc:
            raise InvalidInputError(f"Document already exists: {document_id}") from exc
        finally:
            conn.close()

        logger.info("Created document %s in folder %s", document.id, folder_id)
        return document

    def update_document(
        self,
        user_id: str,
        document_id: str,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Document:
        """Apply a partial update; only the provided fields are written."""
        updates: Dict[str, str] = {}
        if title is not None:
            cleaned = title.strip()
            if not cleaned:
                raise InvalidInputError("Document title must not be blank")
            updates["title"] = cleaned
        if content is not None:
            _validate_content(content)
            updates["content"] = content
        if not updates:
            raise InvalidInputError("Nothing to update")

        updates["updated_at"] = utcnow_iso()
        assignments = ", ".join(f"{column} = ?" for column in updates)
        conn = self.db.connect()
        try:
            with conn:
                cursor = conn.execute(
                    f"UPDATE documents SET {assignments} WHERE id = ? AND user_id = ?",
                    (*updates.values(), document_id, user_id),
                )
        finally:
            conn.close()
        if cursor.rowcount == 0:
            raise NotFoundError(f"Document not found: {document_id}", error="document_not_found")
        logger.debug("Updated document %s fields %s", document_id, sorted(updates))
        return self.get_document(user_id, document_id)

    def delete_document(self, user_id: str, document_id: str) -> None:
        conn = self.db.connect()
        try:
            with conn:
                cursor = conn.execute(
                    "DELETE FROM documents WHERE id = ? AND user_id = ?",
                    (document_id, user_id),
                )
        finally:
            conn.close()
        if cursor.rowcount == 0:
            raise NotFoundError(f"Document not found: {document_id}", error="document_not_found")
        logger.info("Deleted document %s", document_id)

    def search_documents(
        self, user_id: str, query: str, folder_id: Optional[str] = None, limit: int = 100
    ) -> List[Document]:
        """Case-insensitive title substring search, newest first."""
        pattern = f"%{escape_like(query.strip().casefold())}%"
        sql = (
            "SELECT * FROM documents WHERE user_id = ? "
            f"AND casefold(title) LIKE ? ESCAPE '{LIKE_ESCAPE}'"
        )
        params: list = [user_id, pattern]
        if folder_id:
            sql += " AND folder_id = ?"
            params.append(folder_id)
        sql += " ORDER BY updated_at DESC LIMIT ?"
        params.append(limit)

        conn = self.db.connect()
        try:
            rows = conn.execute(sql, params).fetchall()
            return [_row_to_document(row) for row in rows]
        finally:
            conn.close()


__all__ = ["DocumentService", "escape_like"]
