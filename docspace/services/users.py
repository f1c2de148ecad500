"""Service for user accounts and their metadata."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional
import uuid

from ..models.ai import AiSettings
from ..models.user import PROFILE_KEYS, User, UserRole
from .config import AppConfig, get_config
from .database import DatabaseService, utcnow_iso
from .errors import ForbiddenError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


def _row_to_user(row: sqlite3.Row) -> User:
    try:
        metadata = json.loads(row["metadata"] or "{}")
    except json.JSONDecodeError:
        logger.warning("Corrupt metadata for user %s, ignoring", row["user_id"])
        metadata = {}
    return User(
        user_id=row["user_id"],
        email=row["email"],
        metadata=metadata,
        created=datetime.fromisoformat(row["created"]),
    )


class UserService:
    """Read and write user accounts, roles and per-account settings."""

    def __init__(
        self,
        db_service: Optional[DatabaseService] = None,
        config: Optional[AppConfig] = None,
    ):
        self.db = db_service or DatabaseService()
        self.config = config or get_config()

    def get_user(self, user_id: str) -> Optional[User]:
        conn = self.db.connect()
        try:
            row = conn.execute("SELECT * FROM users WHERE user_id = ?", (user_id,)).fetchone()
            return _row_to_user(row) if row else None
        finally:
            conn.close()

    def ensure_user(self, user_id: str, email: Optional[str] = None) -> User:
        """Return the user, creating an empty account on first sight."""
        existing = self.get_user(user_id)
        if existing:
            return existing
        conn = self.db.connect()
        try:
            with conn:
                conn.execute(
                    "INSERT OR IGNORE INTO users (user_id, email, metadata, created) VALUES (?, ?, ?, ?)",
                    (user_id, email, "{}", utcnow_iso()),
                )
        finally:
            conn.close()
        logger.info("Provisioned user %s", user_id)
        return self.get_user(user_id)

    def is_admin(self, user: Optional[User]) -> bool:
        """Admin by role, or by matching the configured initial account email."""
        if user is None:
            return False
        if user.role is UserRole.ADMIN:
            return True
        return bool(user.email and self.config.admin_email and user.email == self.config.admin_email)

    def _write_metadata(self, user_id: str, metadata: Dict[str, Any]) -> None:
        conn = self.db.connect()
        try:
            with conn:
                cursor = conn.execute(
                    "UPDATE users SET metadata = ? WHERE user_id = ?",
                    (json.dumps(metadata, ensure_ascii=False), user_id),
                )
        finally:
            conn.close()
        if cursor.rowcount == 0:
            raise NotFoundError(f"User not found: {user_id}", error="user_not_found")

    def update_profile(self, user_id: str, **fields: Any) -> User:
        """
        Merge profile fields into the user's metadata.

        Only ``avatar``, ``site_name`` and ``site_gradient`` are accepted;
        ``None`` values are skipped.
        """
        unknown = set(fields) - set(PROFILE_KEYS)
        if unknown:
            raise InvalidInputError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        user = self.ensure_user(user_id)
        metadata = dict(user.metadata)
        metadata.update({key: value for key, value in fields.items() if value is not None})
        self._write_metadata(user_id, metadata)
        logger.info("Updated profile for user %s", user_id)
        return self.get_user(user_id)

    def update_ai_settings(self, user_id: str, settings: AiSettings) -> AiSettings:
        """
        Replace the user's AI configs and prompts.

        A config submitted with a blank ``api_key`` keeps the key already
        stored under the same config ID, so clients never need to echo secrets.
        """
        user = self.ensure_user(user_id)
        stored = user.ai_settings()
        configs = []
        for config in settings.configs:
            if not config.api_key:
                previous = stored.find_config(config.id)
                if previous is not None:
                    config = config.model_copy(update={"api_key": previous.api_key})
            configs.append(config)
        merged = AiSettings(configs=configs, prompts=settings.prompts)

        metadata = dict(user.metadata)
        metadata["ai_configs"] = [c.model_dump() for c in merged.configs]
        metadata["ai_prompts"] = [p.model_dump() for p in merged.prompts]
        self._write_metadata(user_id, metadata)
        logger.info(
            "Updated AI settings for user %s (%d configs, %d prompts)",
            user_id,
            len(merged.configs),
            len(merged.prompts),
        )
        return merged

    def resolve_ai_settings(self, user_id: str) -> AiSettings:
        """
        AI settings used to run a transformation for ``user_id``.

        A user without any model config borrows the settings of the account
        named by ``shared_ai_user``, provided that account is an admin.
        """
        user = self.get_user(user_id)
        own = user.ai_settings() if user else AiSettings()
        if own.configs or not self.config.shared_ai_user:
            return own
        if self.config.shared_ai_user == user_id:
            return own

        shared_user = self.get_user(self.config.shared_ai_user)
        if shared_user is None or not self.is_admin(shared_user):
            logger.warning(
                "Shared AI account %s is missing or not an admin; no fallback applied",
                self.config.shared_ai_user,
            )
            return own
        logger.info("User %s is using shared AI settings", user_id)
        return shared_user.ai_settings()

    # Administration

    def list_users(self) -> List[User]:
        conn = self.db.connect()
        try:
            rows = conn.execute("SELECT * FROM users ORDER BY created").fetchall()
            return [_row_to_user(row) for row in rows]
        finally:
            conn.close()

    def create_user(
        self, email: str, role: UserRole = UserRole.USER, user_id: Optional[str] = None
    ) -> User:
        new_id = user_id or str(uuid.uuid4())
        conn = self.db.connect()
        try:
            with conn:
                conn.execute(
                    "INSERT INTO users (user_id, email, metadata, created) VALUES (?, ?, ?, ?)",
                    (new_id, email, json.dumps({"role": role.value}), utcnow_iso()),
                )
        except sqlite3.IntegrityError as exc:
            raise InvalidInputError(f"User already exists: {email}", error="user_exists") from exc
        finally:
            conn.close()
        logger.info("Created user %s with role %s", new_id, role.value)
        return self.get_user(new_id)

    def update_user_role(self, user_id: str, role: UserRole) -> User:
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}", error="user_not_found")
        metadata = dict(user.metadata)
        metadata["role"] = role.value
        self._write_metadata(user_id, metadata)
        logger.info("Changed role of user %s to %s", user_id, role.value)
        return self.get_user(user_id)

    def delete_user(self, acting_user_id: str, user_id: str) -> None:
        if user_id == acting_user_id:
            raise ForbiddenError("You cannot delete your own account", error="cannot_delete_self")
        conn = self.db.connect()
        try:
            with conn:
                conn.execute("DELETE FROM documents WHERE user_id = ?", (user_id,))
                conn.execute("DELETE FROM folders WHERE user_id = ?", (user_id,))
                cursor = conn.execute("DELETE FROM users WHERE user_id = ?", (user_id,))
        finally:
            conn.close()
        if cursor.rowcount == 0:
            raise NotFoundError(f"User not found: {user_id}", error="user_not_found")
        logger.info("Deleted user %s", user_id)


def get_user_service() -> UserService:
    """Get instance of UserService."""
    return UserService()


__all__ = ["UserService", "get_user_service"]
