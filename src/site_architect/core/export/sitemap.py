"""Render pages as a sitemaps.org XML urlset."""

from xml.sax.saxutils import escape

from site_architect.models.page import Page

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def page_location(page: Page, domain: str) -> str:
    """Absolute URL of a page on ``domain`` (https unless a scheme is given)."""
    host = domain.rstrip("/")
    prefix = "" if host.startswith("http") else "https://"
    return f"{prefix}{host}/" if page.url == "/" else f"{prefix}{host}{page.url}"


def pages_to_sitemap_xml(pages: list[Page], domain: str) -> str:
    urls = "\n".join(
        f"  <url>\n    <loc>{escape(page_location(p, domain), _QUOTE_ENTITIES)}</loc>\n  </url>"
        for p in pages
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<urlset xmlns="{SITEMAP_NS}">\n{urls}\n</urlset>\n'
    )
