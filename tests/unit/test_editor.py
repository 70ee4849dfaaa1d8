"""Tests for the tree editing session: moves, undo and write-back."""

import pytest

from site_architect.core.editor import TreeEditor, UndoStack
from site_architect.core.tree.builder import flat_to_tree, tree_to_flat
from site_architect.models.page import Page
from tests.unit.fakes import FakePageStore


def _editor(pages: list[Page], **kwargs) -> tuple[TreeEditor, FakePageStore]:
    store = FakePageStore()
    return TreeEditor(store, "proj1", pages, **kwargs), store


def test_accepted_move_is_written_back(site_pages: list[Page]) -> None:
    editor, store = _editor(site_pages)

    assert editor.move(["seo"], "blog", 0) is True

    assert len(store.calls) == 1
    project_id, items = store.calls[0]
    assert project_id == "proj1"
    assert items == tree_to_flat(editor.tree)
    by_id = {i.id: i for i in items}
    assert by_id["seo"].parent_id == "blog"
    assert by_id["seo"].url == "/blog/seo"
    assert editor.can_undo
    assert not editor.dirty


def test_declined_move_changes_nothing(site_pages: list[Page]) -> None:
    editor, store = _editor(site_pages)
    before = editor.tree

    assert editor.move(["svc"], "web", 0) is False

    assert editor.tree is before
    assert store.calls == []
    assert not editor.can_undo


def test_two_undos_restore_the_original_tree(site_pages: list[Page]) -> None:
    editor, store = _editor(site_pages)
    original = editor.tree

    editor.move(["seo"], "blog", 0)
    after_first = editor.tree
    editor.move(["blog"], None, 0)
    assert editor.undo_depth == 2

    assert editor.undo() is True
    assert editor.tree == after_first
    assert editor.undo() is True
    assert editor.tree == original
    assert store.last_items == tree_to_flat(original)
    assert len(store.calls) == 4

    assert editor.undo() is False
    assert len(store.calls) == 4


def test_optimistic_write_failure_keeps_new_tree_and_marks_dirty(
    site_pages: list[Page],
) -> None:
    editor, store = _editor(site_pages)
    store.fail = True

    assert editor.move(["seo"], "blog", 0) is True

    assert editor.dirty
    assert {p.id: p.url for p in editor.pages}["seo"] == "/blog/seo"
    assert editor.can_undo

    store.fail = False
    assert editor.sync() is True
    assert not editor.dirty
    assert store.last_items == tree_to_flat(editor.tree)


def test_sync_failure_stays_dirty(site_pages: list[Page]) -> None:
    editor, store = _editor(site_pages)
    store.fail = True
    assert editor.sync() is False
    assert editor.dirty


def test_durable_write_failure_leaves_editor_untouched(site_pages: list[Page]) -> None:
    editor, store = _editor(site_pages, optimistic=False)
    before = editor.tree
    store.fail = True

    with pytest.raises(RuntimeError):
        editor.move(["seo"], "blog", 0)

    assert editor.tree is before
    assert not editor.can_undo


def test_durable_undo_failure_keeps_snapshot(site_pages: list[Page]) -> None:
    editor, store = _editor(site_pages, optimistic=False)
    editor.move(["seo"], "blog", 0)
    moved = editor.tree
    store.fail = True

    with pytest.raises(RuntimeError):
        editor.undo()

    assert editor.tree is moved
    assert editor.undo_depth == 1


def test_load_same_structure_keeps_history(site_pages: list[Page]) -> None:
    editor, _store = _editor(site_pages)
    editor.move(["seo"], "blog", 0)

    # The store now holds exactly what the editor wrote
    assert editor.load(editor.pages) is False
    assert editor.can_undo


def test_load_changed_structure_resets_history(site_pages: list[Page]) -> None:
    editor, _store = _editor(site_pages)
    editor.move(["seo"], "blog", 0)

    pages = [*editor.pages, Page(id="new", url="/new", position=3, parent_id="home")]
    assert editor.load(pages) is True

    assert not editor.can_undo
    assert editor.tree == flat_to_tree(pages)


def test_max_undo_drops_oldest_snapshot(site_pages: list[Page]) -> None:
    editor, _store = _editor(site_pages, max_undo=1)
    editor.move(["seo"], "blog", 0)
    after_first = editor.tree
    editor.move(["about"], "blog", 0)

    assert editor.undo_depth == 1
    assert editor.undo() is True
    assert editor.tree == after_first
    assert editor.undo() is False


def test_undo_stack_basics() -> None:
    stack = UndoStack(max_depth=2)
    assert stack.pop() is None
    for i in range(3):
        stack.push((flat_to_tree([Page(id=str(i), url=f"/{i}")])))
    assert len(stack) == 2
    top = stack.pop()
    assert top is not None
    assert top[0].id == "2"
    stack.clear()
    assert len(stack) == 0


def test_undo_stack_rejects_non_positive_cap() -> None:
    with pytest.raises(ValueError, match="max_depth"):
        UndoStack(max_depth=0)
