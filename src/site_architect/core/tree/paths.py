"""URL path derivation from tree position."""

from dataclasses import replace

from site_architect.models.page import MAX_LEVEL, TreeNode

# Slug reported for the home page and for paths with no segments.
ROOT_SLUG = "/"


def url_slug(url: str) -> str:
    """Return the last segment of a URL path.

    >>> url_slug("/category/dogs")
    'dogs'
    >>> url_slug("/")
    '/'
    """
    parts = [p for p in url.rstrip("/").split("/") if p]
    return parts[-1] if parts else ROOT_SLUG


def join_url(parent_url: str | None, slug: str) -> str:
    if not parent_url or parent_url == "/":
        return f"/{slug}"
    return f"{parent_url.rstrip('/')}/{slug}"


def rewrite_urls(
    nodes: tuple[TreeNode, ...],
    parent_url: str | None,
    *,
    level: int = 0,
) -> tuple[TreeNode, ...]:
    """Re-derive URLs for nodes and all their descendants under a new parent URL.

    Each node keeps only its own slug. The home page (slug ``/``) keeps its
    URL wherever it sits. ``level`` is the depth of ``nodes`` and is written
    to every rewritten page, capped at MAX_LEVEL.
    """
    rewritten: list[TreeNode] = []
    for node in nodes:
        slug = url_slug(node.data.url)
        url = node.data.url if slug == ROOT_SLUG else join_url(parent_url, slug)
        children = rewrite_urls(node.children, url, level=level + 1)
        data = replace(node.data, url=url, level=min(level, MAX_LEVEL))
        rewritten.append(replace(node, name=url, data=data, children=children))
    return tuple(rewritten)
