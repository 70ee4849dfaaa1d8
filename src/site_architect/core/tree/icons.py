"""Icon inheritance along the parent chain."""

from site_architect.models.page import Page


def get_icon_map(pages: list[Page]) -> dict[str, str]:
    """Map page id to its own icon, or the nearest ancestor's icon.

    Pages with no icon anywhere up their chain get no entry. A parent cycle
    without an icon on it resolves to no icon.
    """
    pages_by_id = {p.id: p for p in pages}
    # "" marks a resolved page that has no icon
    cache: dict[str, str] = {}

    def resolve(page: Page) -> str:
        chain: list[str] = []
        seen: set[str] = set()
        current: Page | None = page
        icon = ""
        while current is not None:
            if current.id in cache:
                icon = cache[current.id]
                break
            if current.icon:
                icon = current.icon
                break
            if current.id in seen:
                break
            seen.add(current.id)
            chain.append(current.id)
            current = pages_by_id.get(current.parent_id) if current.parent_id else None
        for page_id in chain:
            cache[page_id] = icon
        if current is not None and current.icon:
            cache[current.id] = current.icon
        return icon

    result: dict[str, str] = {}
    for page in pages:
        icon = resolve(page)
        if icon:
            result[page.id] = icon
    return result
