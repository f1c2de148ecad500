from docspace.models.folder import Folder
from docspace.workspace.folder_tree import build_folder_tree, walk_tree


def _folder(folder_id: str, parent_id=None, name=None) -> Folder:
    return Folder(id=folder_id, name=name or folder_id.upper(), parent_id=parent_id)


def test_builds_nested_forest_in_input_order() -> None:
    folders = [
        _folder("a"),
        _folder("b"),
        _folder("a1", "a"),
        _folder("a2", "a"),
        _folder("a1x", "a1"),
    ]

    roots = build_folder_tree(folders)

    assert [node.id for node in roots] == ["a", "b"]
    assert [child.id for child in roots[0].children] == ["a1", "a2"]
    assert roots[0].children[0].children[0].id == "a1x"
    assert roots[1].children == ()


def test_orphans_become_roots() -> None:
    roots = build_folder_tree([_folder("x", "missing-parent"), _folder("y")])

    assert [node.id for node in roots] == ["x", "y"]


def test_cycles_are_dropped_and_first_duplicate_wins() -> None:
    folders = [
        _folder("root"),
        _folder("loop1", "loop2"),
        _folder("loop2", "loop1"),
        _folder("self", "self"),
        _folder("root", name="Second copy"),
    ]

    roots = build_folder_tree(folders)

    assert [node.id for node in roots] == ["root"]
    assert roots[0].name == "ROOT"


def test_deep_chain_does_not_recurse() -> None:
    folders = [_folder("n0")] + [_folder(f"n{i}", f"n{i - 1}") for i in range(1, 5000)]

    rows = walk_tree(build_folder_tree(folders))

    assert len(rows) == 5000
    assert rows[-1][0] == 4999


def test_walk_tree_is_preorder_with_depth() -> None:
    roots = build_folder_tree(
        [_folder("a"), _folder("a1", "a"), _folder("b"), _folder("a2", "a")]
    )

    assert [(depth, node.id) for depth, node in walk_tree(roots)] == [
        (0, "a"),
        (1, "a1"),
        (1, "a2"),
        (0, "b"),
    ]


def test_every_input_folder_appears_once_when_acyclic() -> None:
    folders = [_folder("r"), _folder("c1", "r"), _folder("c2", "c1"), _folder("o", "gone")]

    ids = [node.id for _, node in walk_tree(build_folder_tree(folders))]

    assert sorted(ids) == sorted(f.id for f in folders)
