"""Breadcrumb-style navigation names derived from the ancestor chain."""

from site_architect.models.page import NavPage, Page


def url_display_name(url: str) -> str:
    """Last URL segment with hyphens as spaces; the full URL for the home page."""
    parts = [p for p in url.split("/") if p]
    return parts[-1].replace("-", " ") if parts else url


def display_name(page: Page) -> str:
    return url_display_name(page.url)


def ancestor_chain(page: Page, pages_by_id: dict[str, Page]) -> list[Page]:
    """Ancestors of ``page`` from the root down to its immediate parent."""
    chain: list[Page] = []
    seen = {page.id}
    current = page
    while current.parent_id:
        parent = pages_by_id.get(current.parent_id)
        if parent is None or parent.id in seen:
            break
        seen.add(parent.id)
        chain.append(parent)
        current = parent
    chain.reverse()
    return chain


def compute_nav_fields(pages: list[Page]) -> list[NavPage]:
    """Derive Nav I / Nav II / Nav III names for each page.

    Each level names the ancestor at that depth; the first level past the
    end of the chain names the page itself, deeper levels are None.
    """
    pages_by_id = {p.id: p for p in pages}
    result: list[NavPage] = []
    for page in pages:
        names = [display_name(a) for a in ancestor_chain(page, pages_by_id)]
        names.append(display_name(page))
        padded = names[:3] + [None] * (3 - min(len(names), 3))
        result.append(NavPage(page=page, nav_i=padded[0], nav_ii=padded[1], nav_iii=padded[2]))
    return result
