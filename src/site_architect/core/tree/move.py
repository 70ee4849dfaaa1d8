"""Relocate subtrees within a page tree."""

from collections.abc import Sequence
from dataclasses import replace

from loguru import logger

from site_architect.core.tree.builder import find_node
from site_architect.core.tree.paths import rewrite_urls
from site_architect.models.page import TreeNode


def _extract(
    nodes: tuple[TreeNode, ...], selected: set[str], extracted: list[TreeNode]
) -> tuple[TreeNode, ...]:
    """Remove selected nodes, collecting them with their subtrees intact.

    Selected nodes inside an already-extracted subtree stay where they are.
    """
    remaining: list[TreeNode] = []
    for node in nodes:
        if node.id in selected:
            extracted.append(node)
        else:
            remaining.append(
                replace(node, children=_extract(node.children, selected, extracted))
            )
    return tuple(remaining)


def _insert(
    nodes: tuple[TreeNode, ...],
    parent_id: str,
    index: int,
    moved: tuple[TreeNode, ...],
) -> tuple[TreeNode, ...]:
    out: list[TreeNode] = []
    for node in nodes:
        if node.id == parent_id:
            children = node.children[:index] + moved + node.children[index:]
            out.append(replace(node, children=children))
        else:
            out.append(replace(node, children=_insert(node.children, parent_id, index, moved)))
    return tuple(out)


def move_nodes(
    tree: tuple[TreeNode, ...],
    node_ids: Sequence[str],
    parent_id: str | None,
    index: int,
) -> tuple[TreeNode, ...]:
    """Move the subtrees rooted at ``node_ids`` under ``parent_id`` at ``index``.

    Moved subtrees keep their internal structure and are inserted in the order
    of ``node_ids``. The index is clamped to the target's sibling range. URLs
    and levels of every moved page and its descendants are re-derived from
    the new parent.

    A declined move (nothing to move, or the target is missing once the moved
    subtrees are taken out, e.g. moving a page under its own descendant)
    returns ``tree`` itself, unchanged.

    Args:
        tree: Current tree; never modified.
        node_ids: Pages to relocate.
        parent_id: New parent, or None for the root list.
        index: Position among the new siblings.

    Returns:
        The new tree, or ``tree`` when the move was declined.
    """
    order = {node_id: i for i, node_id in reversed(list(enumerate(node_ids)))}
    extracted: list[TreeNode] = []
    remaining = _extract(tree, set(order), extracted)
    if not extracted:
        logger.debug("Move declined: none of {} are in the tree", list(node_ids))
        return tree
    extracted.sort(key=lambda n: order[n.id])

    if parent_id is None:
        siblings = remaining
        parent_url = None
        level = 0
    else:
        parent, depth = find_node(remaining, parent_id)
        if parent is None:
            logger.debug("Move declined: target parent {} not found", parent_id)
            return tree
        siblings = parent.children
        parent_url = parent.data.url
        level = depth + 1

    insert_at = max(0, min(index, len(siblings)))
    moved = rewrite_urls(tuple(extracted), parent_url, level=level)

    if parent_id is None:
        return remaining[:insert_at] + moved + remaining[insert_at:]
    return _insert(remaining, parent_id, insert_at, moved)
