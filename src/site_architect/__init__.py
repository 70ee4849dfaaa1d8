"""Site architecture trees: build, move, undo, and derived groupings."""

from site_architect.core.editor import TreeEditor, UndoStack
from site_architect.core.tree.builder import flat_to_tree, tree_to_flat, tree_to_pages
from site_architect.core.tree.icons import get_icon_map
from site_architect.core.tree.move import move_nodes
from site_architect.core.tree.nav import compute_nav_fields
from site_architect.core.tree.paths import rewrite_urls, url_slug
from site_architect.core.tree.pillars import get_pillar_color_map, get_pillar_map
from site_architect.models.page import FlatItem, Page, TreeNode
from site_architect.protocols import PageStoreProtocol

__all__ = [
    "FlatItem",
    "Page",
    "PageStoreProtocol",
    "TreeEditor",
    "TreeNode",
    "UndoStack",
    "compute_nav_fields",
    "flat_to_tree",
    "get_icon_map",
    "get_pillar_color_map",
    "get_pillar_map",
    "move_nodes",
    "rewrite_urls",
    "tree_to_flat",
    "tree_to_pages",
    "url_slug",
]
