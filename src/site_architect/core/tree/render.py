"""Render page trees as an indented text outline."""

import io

from site_architect.core.tree.builder import flat_to_tree, tree_to_pages
from site_architect.core.tree.icons import get_icon_map
from site_architect.core.tree.pillars import get_pillar_map
from site_architect.models.page import Page, TreeNode


def render_tree_as_text(
    pages: list[Page],
    *,
    max_depth: int | None = None,
    show_ids: bool = False,
) -> str:
    """Render pages as a bullet outline with inherited icons and pillar tags.

    Args:
        pages: Flat page collection.
        max_depth: Deepest level to render (None = unlimited). Pages cut off
            below it are summarised as "... (N more)".
        show_ids: Append page ids to each line.

    Returns:
        Outline text, one page per line.
    """
    tree = flat_to_tree(pages)
    icons = get_icon_map(pages)
    groups = get_pillar_map(tree_to_pages(tree))

    out = io.StringIO()

    def walk(nodes: tuple[TreeNode, ...], depth: int) -> None:
        for node in nodes:
            indent = "    " * depth
            icon = icons.get(node.id)
            group = groups.get(node.id)
            parts = [f"{indent}- "]
            if icon:
                parts.append(f"{icon} ")
            parts.append(node.data.url)
            if node.data.meta_title:
                parts.append(f"  {node.data.meta_title}")
            if group is not None:
                parts.append("  [home]" if group.is_home else f"  [pillar:{group.index + 1}]")
            if show_ids:
                parts.append(f"  id={node.id}")
            out.write("".join(parts) + "\n")

            if max_depth is not None and depth >= max_depth:
                if node.children:
                    hidden = _count(node.children)
                    noun = "page" if hidden == 1 else "pages"
                    out.write(f"{indent}    - ... ({hidden} more {noun})\n")
                continue
            walk(node.children, depth + 1)

    walk(tree, 0)
    return out.getvalue()


def _count(nodes: tuple[TreeNode, ...]) -> int:
    return sum(1 + _count(n.children) for n in nodes)
