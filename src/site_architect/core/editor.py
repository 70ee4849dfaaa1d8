"""Interactive tree editing session: moves, undo, and write-back."""

from collections.abc import Sequence

from loguru import logger

from site_architect.core.tree.builder import flat_to_tree, tree_to_flat, tree_to_pages
from site_architect.core.tree.move import move_nodes
from site_architect.models.page import Page, TreeNode
from site_architect.protocols import PageStoreProtocol


class UndoStack:
    """Snapshots of earlier trees, newest last.

    Unbounded by default; with ``max_depth`` the oldest snapshot is dropped
    once the cap is reached.
    """

    def __init__(self, max_depth: int | None = None) -> None:
        if max_depth is not None and max_depth < 1:
            msg = f"max_depth must be positive, got {max_depth}"
            raise ValueError(msg)
        self.max_depth = max_depth
        self._snapshots: list[tuple[TreeNode, ...]] = []

    def __len__(self) -> int:
        return len(self._snapshots)

    def push(self, tree: tuple[TreeNode, ...]) -> None:
        self._snapshots.append(tree)
        if self.max_depth is not None and len(self._snapshots) > self.max_depth:
            del self._snapshots[0]

    def pop(self) -> tuple[TreeNode, ...] | None:
        if not self._snapshots:
            return None
        return self._snapshots.pop()

    def clear(self) -> None:
        self._snapshots.clear()


def _structure_key(pages: list[Page]) -> frozenset[tuple[str, str | None, int]]:
    return frozenset((p.id, p.parent_id, p.position) for p in pages)


class TreeEditor:
    """Holds the current tree of one project and applies structural edits.

    Every accepted move and every undo is written back through ``store``.
    In optimistic mode the new tree becomes current before the write; a
    failed write is logged, leaves the editor ``dirty`` and can be retried
    with ``sync()``. With ``optimistic=False`` the write happens first and a
    failure propagates with the editor left untouched.
    """

    def __init__(
        self,
        store: PageStoreProtocol,
        project_id: str,
        pages: list[Page],
        *,
        optimistic: bool = True,
        max_undo: int | None = None,
    ) -> None:
        self.store = store
        self.project_id = project_id
        self.optimistic = optimistic
        self.dirty = False
        self._undo = UndoStack(max_undo)
        self._key = _structure_key(pages)
        self._tree = flat_to_tree(pages)

    @property
    def tree(self) -> tuple[TreeNode, ...]:
        return self._tree

    @property
    def pages(self) -> list[Page]:
        """Current pages in display order."""
        return tree_to_pages(self._tree)

    @property
    def can_undo(self) -> bool:
        return len(self._undo) > 0

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    def load(self, pages: list[Page]) -> bool:
        """Replace the tree from a fresh page collection (e.g. after an add or delete).

        Returns False and keeps the undo history when the structure is the
        same as last loaded.
        """
        key = _structure_key(pages)
        if key == self._key:
            return False
        self._key = key
        self._tree = flat_to_tree(pages)
        self._undo.clear()
        self.dirty = False
        return True

    def move(self, node_ids: Sequence[str], parent_id: str | None, index: int) -> bool:
        """Move pages under ``parent_id`` at ``index``. Returns False if declined."""
        new_tree = move_nodes(self._tree, node_ids, parent_id, index)
        if new_tree is self._tree:
            logger.info("Move of {} under {} declined", list(node_ids), parent_id)
            return False
        self._commit(new_tree, push=True)
        return True

    def undo(self) -> bool:
        """Restore the tree from before the last move. No-op on an empty history."""
        previous = self._undo.pop()
        if previous is None:
            return False
        try:
            self._commit(previous, push=False)
        except Exception:
            self._undo.push(previous)
            raise
        return True

    def sync(self) -> bool:
        """Write the current tree again, e.g. after an optimistic write failed."""
        try:
            self.store.apply_reorder(self.project_id, tree_to_flat(self._tree))
        except Exception:
            logger.exception("Failed to sync project {}", self.project_id)
            self.dirty = True
            return False
        self.dirty = False
        return True

    def _commit(self, new_tree: tuple[TreeNode, ...], *, push: bool) -> None:
        items = tree_to_flat(new_tree)
        if self.optimistic:
            if push:
                self._undo.push(self._tree)
            self._tree = new_tree
            try:
                self.store.apply_reorder(self.project_id, items)
            except Exception:
                logger.exception("Failed to persist tree for project {}", self.project_id)
                self.dirty = True
            else:
                self.dirty = False
        else:
            self.store.apply_reorder(self.project_id, items)
            if push:
                self._undo.push(self._tree)
            self._tree = new_tree
            self.dirty = False
        self._key = _structure_key(tree_to_pages(new_tree))
        logger.debug("Tree for project {} now has {} pages", self.project_id, len(items))
