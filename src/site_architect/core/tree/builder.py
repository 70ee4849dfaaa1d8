"""Convert between flat page collections and nested trees."""

from collections import defaultdict
from dataclasses import replace

from site_architect.models.page import MAX_LEVEL, FlatItem, Page, TreeNode


def _cyclic_ids(pages_by_id: dict[str, Page]) -> set[str]:
    """Return ids of pages whose parent chain leads back to themselves."""
    cyclic: set[str] = set()
    settled: set[str] = set()
    for start in pages_by_id:
        if start in settled:
            continue
        chain: list[str] = []
        on_chain: set[str] = set()
        current: str | None = start
        while current is not None and current in pages_by_id and current not in settled:
            if current in on_chain:
                # Everything from the first visit of `current` onwards is the loop
                cyclic.update(chain[chain.index(current) :])
                break
            chain.append(current)
            on_chain.add(current)
            current = pages_by_id[current].parent_id
        settled.update(chain)
    return cyclic


def effective_parent_ids(pages: list[Page]) -> dict[str, str | None]:
    """Map each page id to the parent it is displayed under.

    Orphans (parent not in the collection) and pages caught in a parent
    cycle map to None.
    """
    pages_by_id = {p.id: p for p in pages}
    cyclic = _cyclic_ids(pages_by_id)
    result: dict[str, str | None] = {}
    for page in pages:
        parent_id = page.parent_id
        if parent_id is None or parent_id not in pages_by_id or page.id in cyclic:
            result[page.id] = None
        else:
            result[page.id] = parent_id
    return result


def flat_to_tree(pages: list[Page]) -> tuple[TreeNode, ...]:
    """Nest a flat page collection, sorting every sibling list by position.

    Returns only the roots: pages without a parent, orphans, and pages whose
    parent chain loops back on itself.
    """
    parents = effective_parent_ids(pages)
    children_by_parent: dict[str | None, list[Page]] = defaultdict(list)
    for page in pages:
        children_by_parent[parents[page.id]].append(page)

    def build(parent_id: str | None) -> tuple[TreeNode, ...]:
        siblings = sorted(children_by_parent.get(parent_id, []), key=lambda p: p.position)
        return tuple(
            TreeNode(id=p.id, name=p.url, data=p, children=build(p.id)) for p in siblings
        )

    return build(None)


def tree_to_flat(tree: tuple[TreeNode, ...], parent_id: str | None = None) -> list[FlatItem]:
    """Walk a tree in display order, renumbering positions from 0 per sibling list.

    The result is the canonical form handed to persistence after an edit.
    """
    result: list[FlatItem] = []

    def walk(nodes: tuple[TreeNode, ...], parent: str | None, depth: int) -> None:
        for i, node in enumerate(nodes):
            result.append(
                FlatItem(
                    id=node.id,
                    parent_id=parent,
                    position=i,
                    url=node.data.url,
                    level=min(depth, MAX_LEVEL),
                )
            )
            walk(node.children, node.id, depth + 1)

    walk(tree, parent_id, 0)
    return result


def tree_to_pages(tree: tuple[TreeNode, ...]) -> list[Page]:
    """Return pages in pre-order with structural fields taken from the tree.

    ``level`` is recomputed from depth; payload fields (titles, keywords,
    icon...) are carried through untouched.
    """
    pages: list[Page] = []

    def walk(nodes: tuple[TreeNode, ...], parent: str | None, depth: int) -> None:
        for i, node in enumerate(nodes):
            pages.append(
                replace(node.data, parent_id=parent, position=i, level=min(depth, MAX_LEVEL))
            )
            walk(node.children, node.id, depth + 1)

    walk(tree, None, 0)
    return pages


def find_node(
    tree: tuple[TreeNode, ...], node_id: str
) -> tuple[TreeNode, int] | tuple[None, None]:
    """Locate a node by id, returning it with its depth (roots are depth 0)."""
    stack: list[tuple[TreeNode, int]] = [(n, 0) for n in reversed(tree)]
    while stack:
        node, depth = stack.pop()
        if node.id == node_id:
            return node, depth
        stack.extend((c, depth + 1) for c in reversed(node.children))
    return None, None


def iter_nodes(tree: tuple[TreeNode, ...]) -> list[TreeNode]:
    """All nodes of a tree in pre-order."""
    out: list[TreeNode] = []
    for node in tree:
        out.append(node)
        out.extend(iter_nodes(node.children))
    return out
