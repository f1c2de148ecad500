"""Folder sidebar: optimistic folder list rendered as a tree."""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple
import uuid

from ..models.folder import Folder, FolderTreeNode
from .folder_tree import build_folder_tree, walk_tree
from .interfaces import FolderBackend
from .notices import NoticeBoard
from .optimistic import OptimisticStore

logger = logging.getLogger(__name__)


class FolderSidebar:
    """Owns the folder collection shown in the sidebar."""

    def __init__(
        self,
        backend: FolderBackend,
        notices: Optional[NoticeBoard] = None,
        folders: Iterable[Folder] = (),
    ) -> None:
        self.backend = backend
        self.notices = notices or NoticeBoard()
        self.store: OptimisticStore[Folder] = OptimisticStore(
            folders,
            write_add=self._write_add,
            write_delete=self._write_delete,
            prepend=False,
            on_error=self._report_error,
        )
        # Descendants of folders with a delete in flight, until the next reload
        self._hidden: Set[str] = set()
        self._tree_source: Optional[Tuple[Tuple[Folder, ...], FrozenSet[str]]] = None
        self._tree: Tuple[FolderTreeNode, ...] = ()

    async def _write_add(self, folder: Folder) -> Folder:
        return await self.backend.create_folder(folder.name, folder.parent_id, folder_id=folder.id)

    async def _write_delete(self, folder: Folder) -> None:
        await self.backend.delete_folder(folder.id)

    def _report_error(self, action: str, exc: BaseException) -> None:
        verb = "create" if action == "add" else "delete"
        self.notices.error(f"Failed to {verb} folder: {exc}")

    @property
    def folders(self) -> Tuple[Folder, ...]:
        displayed = self.store.displayed
        if not self._hidden:
            return displayed
        return tuple(f for f in displayed if f.id not in self._hidden)

    @property
    def tree(self) -> Tuple[FolderTreeNode, ...]:
        """Forest for the current displayed folders, rebuilt when they change."""
        displayed = self.store.displayed
        hidden = frozenset(self._hidden)
        source = self._tree_source
        if source is None or source[0] is not displayed or source[1] != hidden:
            self._tree = build_folder_tree(self.folders)
            self._tree_source = (displayed, hidden)
        return self._tree

    def _descendants(self, folder_id: str) -> Set[str]:
        children: Dict[Optional[str], List[str]] = {}
        for folder in self.store.displayed:
            children.setdefault(folder.parent_id, []).append(folder.id)
        found: Set[str] = set()
        stack = [folder_id]
        while stack:
            for child in children.get(stack.pop(), ()):
                if child not in found and child != folder_id:
                    found.add(child)
                    stack.append(child)
        return found

    def rows(self) -> List[Tuple[int, FolderTreeNode]]:
        """Indented rows in display order."""
        return walk_tree(self.tree)

    async def reload(self) -> bool:
        try:
            folders = await self.backend.list_folders()
        except Exception as exc:
            logger.warning("Failed to load folders: %s", exc)
            self.notices.error(f"Failed to load folders: {exc}")
            return False
        self._hidden.clear()
        self.store.refresh(folders)
        return True

    async def create_folder(self, name: str, parent_id: Optional[str] = None) -> Optional[Folder]:
        """Create a folder; blank names are rejected without a backend call."""
        cleaned = (name or "").strip()
        if not cleaned:
            self.notices.error("Folder name is required")
            return None
        folder = Folder(id=str(uuid.uuid4()), name=cleaned, parent_id=parent_id)
        if not await self.store.add(folder):
            return None
        await self.reload()
        return folder

    async def delete_folder(self, folder_id: str) -> bool:
        folder = next((f for f in self.store.displayed if f.id == folder_id), None)
        if folder is None:
            folder = Folder(id=folder_id, name=folder_id)
        self._hidden.update(self._descendants(folder_id))
        ok = await self.store.delete(folder)
        if ok:
            await self.reload()
        return ok


__all__ = ["FolderSidebar"]
