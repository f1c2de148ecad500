import asyncio
from unittest.mock import AsyncMock

import pytest

from docspace.models.ai import TransformErrorCode, TransformResult
from docspace.models.folder import Folder
from docspace.models.user import User
from docspace.services.auth import AuthError
from docspace.services.config import reload_config
from docspace.services.errors import ForbiddenError
from docspace.workspace.autosave import AutosaveState
from docspace.workspace.document_list import DocumentListView
from docspace.workspace.editor import DocumentEditor
from docspace.workspace.notices import NoticeBoard, NoticeKind
from docspace.workspace.session import WorkspaceSession
from docspace.workspace.sidebar import FolderSidebar
from docspace.workspace.transform import DocumentTransformer


def test_notice_board_posts_and_dismisses() -> None:
    board = NoticeBoard()
    first = board.error("Broken")
    board.success("Fixed")

    assert board.latest().text == "Fixed"
    assert board.latest(NoticeKind.ERROR) == first

    board.dismiss(first.id)
    assert [n.text for n in board.notices] == ["Fixed"]


@pytest.mark.asyncio
async def test_sidebar_creates_nested_folder_and_renders_rows(memory_backend) -> None:
    sidebar = FolderSidebar(memory_backend)
    await sidebar.reload()

    parent = await sidebar.create_folder("Work")
    child = await sidebar.create_folder("Specs", parent.id)

    assert [(depth, node.name) for depth, node in sidebar.rows()] == [(0, "Work"), (1, "Specs")]
    assert memory_backend.folders[child.id].parent_id == parent.id


@pytest.mark.asyncio
async def test_sidebar_rejects_blank_name_without_backend_call(memory_backend) -> None:
    sidebar = FolderSidebar(memory_backend)

    assert await sidebar.create_folder("   ") is None

    assert memory_backend.count("create_folder") == 0
    assert sidebar.notices.latest(NoticeKind.ERROR).text == "Folder name is required"


@pytest.mark.asyncio
async def test_sidebar_failed_delete_posts_notice(memory_backend) -> None:
    memory_backend.folders["f1"] = Folder(id="f1", name="Keep")
    sidebar = FolderSidebar(memory_backend)
    await sidebar.reload()
    memory_backend.fail["delete_folder"] = RuntimeError("permission denied")

    assert await sidebar.delete_folder("f1") is False

    assert "permission denied" in sidebar.notices.latest(NoticeKind.ERROR).text
    await sidebar.reload()
    assert [f.id for f in sidebar.folders] == ["f1"]


@pytest.mark.asyncio
async def test_sidebar_hides_subfolders_while_delete_is_pending(memory_backend) -> None:
    memory_backend.folders["a"] = Folder(id="a", name="A")
    memory_backend.folders["b"] = Folder(id="b", name="B", parent_id="a")
    memory_backend.folders["c"] = Folder(id="c", name="C", parent_id="b")
    memory_backend.folders["d"] = Folder(id="d", name="D")
    sidebar = FolderSidebar(memory_backend)
    await sidebar.reload()
    gate = asyncio.Event()
    memory_backend.gates["delete_folder"] = gate

    task = asyncio.create_task(sidebar.delete_folder("a"))
    await asyncio.sleep(0)

    assert [f.id for f in sidebar.folders] == ["d"]
    assert [node.id for node in sidebar.tree] == ["d"]

    gate.set()
    assert await task is True
    assert [f.id for f in sidebar.folders] == ["d"]


@pytest.mark.asyncio
async def test_sidebar_tree_is_cached_until_folders_change(memory_backend) -> None:
    sidebar = FolderSidebar(memory_backend, folders=[Folder(id="a", name="A")])

    first = sidebar.tree
    assert sidebar.tree is first

    await sidebar.create_folder("B")
    assert sidebar.tree is not first


@pytest.mark.asyncio
async def test_document_list_create_delete_and_batch(memory_backend) -> None:
    transform = AsyncMock(return_value=TransformResult.success("n", "t"))
    view = DocumentListView(memory_backend, "f1", transform, search_delay=0.01, result_ttl=0.01)
    await view.reload()

    created = await view.create_document("Draft")
    assert [d.title for d in view.displayed] == ["Draft"]
    assert await view.create_document("") is None

    view.batch.toggle(created.id)
    result = await view.run_batch("cfg", "prm")

    assert (result.total, result.success, result.fail) == (1, 1, 0)
    assert view.notices.latest(NoticeKind.SUCCESS).text.startswith("Batch finished")

    assert await view.delete_document(created.id)
    assert view.displayed == ()


@pytest.mark.asyncio
async def test_document_list_batch_without_selection_posts_notice(memory_backend) -> None:
    view = DocumentListView(memory_backend, "f1", AsyncMock())

    assert await view.run_batch("cfg", "prm") is None
    assert view.notices.latest(NoticeKind.ERROR).text == "Select at least one document"


@pytest.mark.asyncio
async def test_editor_flushes_before_transform_and_reports_failure(memory_backend) -> None:
    document = memory_backend.seed_document("Draft", content="old")
    transform = AsyncMock(
        return_value=TransformResult.failure(TransformErrorCode.MODEL_HTTP_ERROR, "HTTP 401")
    )
    editor = DocumentEditor(document, memory_backend, transform, autosave_delay=10)

    assert editor.set_content("new") is AutosaveState.DIRTY_PENDING
    result = await editor.transform("cfg", "prm")

    assert not result.ok
    assert memory_backend.documents[document.id].content == "new"
    assert editor.notices.latest(NoticeKind.ERROR).text == "AI processing failed: HTTP 401"
    assert not editor.transforming
    await editor.close()


@pytest.mark.asyncio
async def test_editor_autosave_failure_posts_notice(memory_backend) -> None:
    document = memory_backend.seed_document("Draft")
    memory_backend.fail["update_document"] = RuntimeError("offline")
    editor = DocumentEditor(document, memory_backend, AsyncMock(), autosave_delay=0.01)

    editor.set_title("Renamed")
    await asyncio.sleep(0.05)
    await editor.autosave.wait_idle()

    assert editor.state is AutosaveState.DIRTY
    assert "offline" in editor.notices.latest(NoticeKind.ERROR).text


def _session(backend) -> WorkspaceSession:
    transformer = DocumentTransformer(backend, AsyncMock(), backend)
    return WorkspaceSession(
        backend, backend, backend, transformer, autosave_delay=0.01, search_delay=0.01
    )


@pytest.mark.asyncio
async def test_session_requires_sign_in(memory_backend) -> None:
    memory_backend.signed_in = False
    session = _session(memory_backend)

    with pytest.raises(AuthError):
        await session.start()
    with pytest.raises(AuthError):
        await session.open_sidebar()


@pytest.mark.asyncio
async def test_session_builds_views_and_tracks_admin(memory_backend) -> None:
    session = _session(memory_backend)
    await session.start()

    assert not session.is_admin
    with pytest.raises(ForbiddenError):
        session.require_admin()

    sidebar = await session.open_sidebar()
    folder = await sidebar.create_folder("Notes")
    listing = await session.open_folder(folder.id)
    doc = await listing.create_document("Draft")
    editor = await session.open_editor(doc.id)

    assert editor.document.title == "Draft"
    assert await session.open_editor("missing") is None
    assert session.notices.latest(NoticeKind.ERROR).text == "Document not found"

    await session.sign_out()
    with pytest.raises(AuthError):
        session.user


@pytest.mark.asyncio
async def test_session_profile_update(memory_backend) -> None:
    memory_backend.user = User(user_id="root", metadata={"role": "admin"})
    session = _session(memory_backend)
    await session.start()

    user = await session.update_profile(site_name="Team Docs")

    assert session.is_admin
    assert user.metadata["site_name"] == "Team Docs"
    assert session.notices.latest(NoticeKind.SUCCESS).text == "Settings updated"


@pytest.mark.asyncio
async def test_session_timings_come_from_environment(monkeypatch, memory_backend) -> None:
    monkeypatch.setenv("AUTOSAVE_DELAY_SECONDS", "0.02")
    monkeypatch.setenv("SEARCH_DELAY_SECONDS", "0.03")
    monkeypatch.setenv("BATCH_RESULT_TTL_SECONDS", "0.04")
    reload_config()
    transformer = DocumentTransformer(memory_backend, AsyncMock(), memory_backend)
    session = WorkspaceSession(memory_backend, memory_backend, memory_backend, transformer)
    await session.start()

    assert (session.autosave_delay, session.search_delay, session.result_ttl) == (0.02, 0.03, 0.04)

    listing = await session.open_folder("f1")
    assert listing.batch.result_ttl == 0.04
    explicit = WorkspaceSession(
        memory_backend, memory_backend, memory_backend, transformer, search_delay=0.5
    )
    assert explicit.search_delay == 0.5
    assert explicit.autosave_delay == 0.02
