"""Client-side workspace logic: optimistic lists, autosave, search, batch AI."""

from .autosave import AutosaveController, AutosaveState
from .batch import BatchProcessor, process_sequentially
from .debounce import Debouncer
from .document_list import DocumentListView
from .editor import DocumentEditor
from .folder_tree import build_folder_tree, walk_tree
from .notices import Notice, NoticeBoard, NoticeKind
from .optimistic import MutationAction, OptimisticStore, PendingMutation, reduce_displayed
from .search import SearchController, SearchScope
from .session import WorkspaceSession
from .sidebar import FolderSidebar
from .transform import DocumentTransformer, derived_title

__all__ = [
    "AutosaveController",
    "AutosaveState",
    "BatchProcessor",
    "process_sequentially",
    "Debouncer",
    "DocumentListView",
    "DocumentEditor",
    "build_folder_tree",
    "walk_tree",
    "Notice",
    "NoticeBoard",
    "NoticeKind",
    "MutationAction",
    "OptimisticStore",
    "PendingMutation",
    "reduce_displayed",
    "SearchController",
    "SearchScope",
    "WorkspaceSession",
    "FolderSidebar",
    "DocumentTransformer",
    "derived_title",
]
