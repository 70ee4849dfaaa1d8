"""Pillar clusters: color groups derived from tree shape.

A pillar is a page whose parent is a root page. The pillar and all of its
descendants share one group; root pages share the home group. Colors come
from a fixed palette assigned in first-encounter order over the input, so
callers wanting a layout-independent assignment should pass pages in
display order (see ``tree_to_pages``).
"""

from site_architect.models.page import Page, PillarColor, PillarGroup

PILLAR_PALETTE: tuple[PillarColor, ...] = (
    PillarColor(badge="bg-purple-100 text-purple-700", border="#a855f7", bg="bg-purple-50"),
    PillarColor(badge="bg-sky-100 text-sky-700", border="#0ea5e9", bg="bg-sky-50"),
    PillarColor(badge="bg-orange-100 text-orange-700", border="#f97316", bg="bg-orange-50"),
    PillarColor(badge="bg-teal-100 text-teal-700", border="#14b8a6", bg="bg-teal-50"),
    PillarColor(badge="bg-pink-100 text-pink-700", border="#ec4899", bg="bg-pink-50"),
    PillarColor(badge="bg-amber-100 text-amber-700", border="#f59e0b", bg="bg-amber-50"),
    PillarColor(badge="bg-indigo-100 text-indigo-700", border="#6366f1", bg="bg-indigo-50"),
    PillarColor(badge="bg-emerald-100 text-emerald-700", border="#10b981", bg="bg-emerald-50"),
    PillarColor(badge="bg-rose-100 text-rose-700", border="#f43f5e", bg="bg-rose-50"),
    PillarColor(badge="bg-cyan-100 text-cyan-700", border="#06b6d4", bg="bg-cyan-50"),
    PillarColor(badge="bg-lime-100 text-lime-700", border="#84cc16", bg="bg-lime-50"),
    PillarColor(badge="bg-violet-100 text-violet-700", border="#8b5cf6", bg="bg-violet-50"),
)

ROOT_COLOR = PillarColor(badge="bg-green-100 text-green-700", border="#22c55e", bg="bg-green-50")

HOME_GROUP = PillarGroup(pillar_id=None, index=-1, color=ROOT_COLOR)


def _pillar_id(page: Page, pages_by_id: dict[str, Page], root_ids: set[str]) -> str | None:
    """Walk up from a non-root page to the ancestor sitting directly under a root."""
    current = page
    visited = {page.id}
    while True:
        parent = pages_by_id.get(current.parent_id) if current.parent_id else None
        if parent is None:
            return None
        if parent.id in root_ids:
            return current.id
        if parent.id in visited:
            return None
        visited.add(parent.id)
        current = parent


def get_pillar_map(pages: list[Page]) -> dict[str, PillarGroup]:
    """Assign every page to its pillar group.

    Root pages (no parent, or parent missing from ``pages``) get HOME_GROUP.
    Pages with no pillar ancestor, such as pages on a parent cycle, get no
    entry.
    """
    pages_by_id = {p.id: p for p in pages}
    root_ids = {
        p.id for p in pages if p.parent_id is None or p.parent_id not in pages_by_id
    }

    pillar_of: dict[str, str] = {}
    groups: dict[str, PillarGroup] = {}
    for page in pages:
        if page.id in root_ids:
            continue
        pid = _pillar_id(page, pages_by_id, root_ids)
        if pid is None:
            continue
        pillar_of[page.id] = pid
        if pid not in groups:
            index = len(groups)
            groups[pid] = PillarGroup(
                pillar_id=pid, index=index, color=PILLAR_PALETTE[index % len(PILLAR_PALETTE)]
            )

    result: dict[str, PillarGroup] = {}
    for page in pages:
        if page.id in root_ids:
            result[page.id] = HOME_GROUP
        elif page.id in pillar_of:
            result[page.id] = groups[pillar_of[page.id]]
    return result


def get_pillar_color_map(pages: list[Page]) -> dict[str, PillarColor]:
    """Map page id to the color of its pillar group."""
    return {page_id: group.color for page_id, group in get_pillar_map(pages).items()}
