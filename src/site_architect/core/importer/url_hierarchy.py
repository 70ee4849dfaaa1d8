"""Derive a parent-first page plan from a list of URLs."""

import re
from collections.abc import Iterable
from urllib.parse import urlsplit

from site_architect.models.page import MAX_LEVEL, PlannedPage


def slug_to_title(slug: str) -> str:
    """Turn ``best-dog_food`` into ``Best Dog Food``."""
    words = re.sub(r"[-_]", " ", slug)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), words).strip()


def normalize_path(raw: str) -> str | None:
    """Path part of a URL or path, without trailing slash. None if unusable."""
    raw = raw.strip()
    if not raw:
        return None
    if raw.startswith("/"):
        path = urlsplit(raw).path
    else:
        parts = urlsplit(raw)
        if not parts.scheme or not parts.netloc:
            return None
        path = parts.path
    return path.rstrip("/") or "/"


def _depth(path: str) -> int:
    return 0 if path == "/" else len([s for s in path.split("/") if s])


def plan_pages_from_urls(urls: Iterable[str]) -> list[PlannedPage]:
    """Plan pages for every URL plus the implicit parents of nested paths.

    The plan is sorted parent-first (by depth, then alphabetically) so that
    each ``parent_url`` is created before its children. Top-level paths hang
    under ``/`` only when ``/`` itself is part of the plan.
    """
    paths: set[str] = set()
    for raw in urls:
        path = normalize_path(raw)
        if path is not None:
            paths.add(path)

    all_paths = set(paths)
    for path in paths:
        segments = [s for s in path.split("/") if s]
        for i in range(1, len(segments)):
            all_paths.add("/" + "/".join(segments[:i]))

    plan: list[PlannedPage] = []
    for path in sorted(all_paths, key=lambda p: (_depth(p), p)):
        segments = [s for s in path.split("/") if s]
        if path == "/":
            parent_url = None
        elif len(segments) == 1:
            parent_url = "/" if "/" in all_paths else None
        else:
            parent_url = "/" + "/".join(segments[:-1])
        plan.append(
            PlannedPage(
                url=path,
                parent_url=parent_url,
                level=min(_depth(path), MAX_LEVEL),
                meta_title="Home" if path == "/" else slug_to_title(segments[-1]),
                page_type="Home Page" if path == "/" else None,
            )
        )
    return plan
