"""Rebuild the sidebar folder forest from flat parent-pointer records."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from ..models.folder import Folder, FolderTreeNode


def build_folder_tree(folders: Iterable[Folder]) -> Tuple[FolderTreeNode, ...]:
    """
    Build an immutable forest from a flat folder list.

    Roots are folders without a parent, or whose parent is not in the input
    (orphans are promoted rather than lost). Children and roots keep input
    order. Folders on a parent cycle are never reachable from a root and are
    dropped. When an id repeats, the first record wins.
    """
    by_id: Dict[str, Folder] = {}
    for folder in folders:
        by_id.setdefault(folder.id, folder)

    children: Dict[str, List[str]] = {folder_id: [] for folder_id in by_id}
    roots: List[str] = []
    for folder in by_id.values():
        if folder.parent_id and folder.parent_id in by_id:
            children[folder.parent_id].append(folder.id)
        else:
            roots.append(folder.id)

    # Post-order over an explicit stack so deep trees cannot hit the recursion limit.
    built: Dict[str, FolderTreeNode] = {}
    stack: List[Tuple[str, bool]] = [(root, False) for root in reversed(roots)]
    while stack:
        folder_id, expanded = stack.pop()
        if expanded:
            folder = by_id[folder_id]
            built[folder_id] = FolderTreeNode(
                id=folder.id,
                name=folder.name,
                parent_id=folder.parent_id,
                children=tuple(built[child] for child in children[folder_id]),
            )
            continue
        stack.append((folder_id, True))
        stack.extend((child, False) for child in reversed(children[folder_id]))

    return tuple(built[root] for root in roots)


def walk_tree(roots: Sequence[FolderTreeNode]) -> List[Tuple[int, FolderTreeNode]]:
    """Pre-order ``(depth, node)`` pairs; roots have depth 0."""
    ordered: List[Tuple[int, FolderTreeNode]] = []
    stack: List[Tuple[int, FolderTreeNode]] = [(0, node) for node in reversed(roots)]
    while stack:
        depth, node = stack.pop()
        ordered.append((depth, node))
        stack.extend((depth + 1, child) for child in reversed(node.children))
    return ordered


__all__ = ["build_folder_tree", "walk_tree"]
