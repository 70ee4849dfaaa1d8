"""Import planned pages and CSV rows into a project."""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from loguru import logger

from site_architect.core.database.store import PageStore
from site_architect.core.importer.url_hierarchy import normalize_path, plan_pages_from_urls
from site_architect.core.tree.nav import ancestor_chain, url_display_name
from site_architect.models.page import MAX_LEVEL, ImportRow, Page, PlannedPage

# Index pages created for Nav names that match no page.
CATEGORY_PREFIX = "/_category"

_HOME_FIELDS = {"meta_title": "Home", "page_type": "Home Page"}


@dataclass(frozen=True)
class ImportStats:
    """Summary of an import operation."""

    created: int
    updated: int
    errors: int


class _ImportRun:
    """Upserts of one import, with the project's pages indexed by URL."""

    def __init__(self, store: PageStore, project_id: str) -> None:
        self.store = store
        self.project_id = project_id
        self.by_url: dict[str, Page] = {p.url: p for p in store.load_pages(project_id)}
        self.created = self.updated = self.errors = 0

    def upsert(self, url: str, parent: Page | None, fields: dict[str, Any]) -> Page | None:
        """Create or update ``url`` under ``parent``. None if the write failed."""
        level = min(parent.level + 1, MAX_LEVEL) if parent else 0
        try:
            page, was_created = self.store.upsert_page(
                self.project_id,
                url,
                parent_id=parent.id if parent else None,
                level=level,
                **fields,
            )
        except Exception:
            logger.exception("Failed to import {}", url)
            self.errors += 1
            return None

        self.by_url[page.url] = page
        if was_created:
            self.created += 1
        else:
            self.updated += 1
        return page

    def finish(self) -> ImportStats:
        logger.info(
            "Import complete: {} created, {} updated, {} errors",
            self.created,
            self.updated,
            self.errors,
        )
        return ImportStats(created=self.created, updated=self.updated, errors=self.errors)


def _row_payload(row: ImportRow) -> dict[str, Any]:
    # Level and Nav columns describe the hierarchy; levels are re-derived from parents.
    return {
        "icon": row.icon,
        "user_description": row.user_description,
        "meta_title": row.meta_title,
        "meta_description": row.meta_description,
        "keyword": row.keyword,
        "page_type": row.page_type,
        "notes": row.notes,
    }


def _import_plan(
    run: _ImportRun, plan: list[PlannedPage], payloads: dict[str, dict[str, Any]]
) -> None:
    for planned in plan:
        parent_url = planned.parent_url
        if parent_url is None and planned.url != "/" and planned.url.count("/") == 1:
            # Top-level pages hang under an existing home page.
            parent_url = "/" if "/" in run.by_url else None
        parent = run.by_url.get(parent_url) if parent_url else None
        fields: dict[str, Any] = {"meta_title": planned.meta_title, "page_type": planned.page_type}
        fields.update({k: v for k, v in payloads.get(planned.url, {}).items() if v is not None})
        run.upsert(planned.url, parent, fields)


def import_planned_pages(
    store: PageStore,
    project_id: str,
    plan: list[PlannedPage],
    *,
    payloads: dict[str, dict[str, Any]] | None = None,
) -> ImportStats:
    """Create or update every planned page, parents first.

    ``parent_url`` is resolved against pages imported earlier in the plan and
    pages already in the project; an unresolved parent leaves the page at the
    root. Top-level paths without a planned parent go under the project's
    ``/`` page when it exists. Levels follow the resolved parent.

    Args:
        store: Page store (schema must already exist).
        project_id: Project receiving the pages.
        plan: Pages sorted parent-first, as from ``plan_pages_from_urls``.
        payloads: Optional extra fields per URL, overriding planned values.

    Returns:
        ImportStats with counts of created/updated/failed pages.
    """
    run = _ImportRun(store, project_id)
    _import_plan(run, plan, payloads or {})
    return run.finish()


def nav_names(row: ImportRow) -> tuple[str, ...]:
    """Non-empty Nav I/II/III values up to the first gap."""
    names: list[str] = []
    for name in (row.nav_i, row.nav_ii, row.nav_iii):
        if not name:
            break
        names.append(name)
    return tuple(names)


def nav_ancestors(url: str, names: tuple[str, ...]) -> tuple[str, ...]:
    """Names of a page's ancestors, root first, read from its Nav columns.

    The columns name the ancestors followed by the page itself while there is
    room; a page deeper than the columns reach lists ancestors only.
    """
    if names and _name_key(names[-1:]) == _name_key((url_display_name(url),)):
        return names[:-1]
    return names


def _name_key(names: Iterable[str]) -> tuple[str, ...]:
    return tuple(n.strip().casefold() for n in names)


def category_url(names: tuple[str, ...]) -> str:
    """URL of the index page standing in for a chain of Nav names."""
    if names == ("/",):
        return "/"
    slugs = [re.sub(r"\s+", "-", n.strip().lower()) for n in names if n != "/"]
    return f"{CATEGORY_PREFIX}/{'/'.join(slugs)}"


def _name_paths(pages: list[Page]) -> dict[tuple[str, ...], str]:
    pages_by_id = {p.id: p for p in pages}
    paths: dict[tuple[str, ...], str] = {}
    for page in pages:
        chain = [*ancestor_chain(page, pages_by_id), page]
        paths.setdefault(_name_key([url_display_name(p.url) for p in chain]), page.url)
    return paths


def _resolve_nav_parent(
    run: _ImportRun, by_names: dict[tuple[str, ...], str], ancestors: tuple[str, ...]
) -> Page | None:
    parent: Page | None = None
    for depth in range(1, len(ancestors) + 1):
        names = ancestors[:depth]
        key = _name_key(names)
        url = by_names.get(key)
        page = run.by_url.get(url) if url else None
        if page is None:
            url = category_url(names)
            page = run.by_url.get(url)
        if page is None:
            fields = (
                _HOME_FIELDS
                if url == "/"
                else {"user_description": f"{names[-1]} category", "page_type": "Index Page"}
            )
            page = run.upsert(url, parent, fields)
            if page is None:
                return None
            logger.debug("Created {} for Nav names {}", url, list(names))
        by_names[key] = page.url
        parent = page
    return parent


def _import_nav_rows(run: _ImportRun, rows: list[tuple[str, ImportRow]]) -> None:
    by_names = _name_paths(list(run.by_url.values()))
    pending = [(path, row, nav_ancestors(path, nav_names(row))) for path, row in rows]
    # Shallow rows first so parents exist before their children; stable for siblings.
    pending.sort(key=lambda item: len(item[2]))

    for path, row, ancestors in pending:
        parent = _resolve_nav_parent(run, by_names, ancestors)
        if ancestors and parent is None:
            logger.warning("Skipping {}: could not create its Nav parents", path)
            run.errors += 1
            continue
        page = run.upsert(path, parent, {k: v for k, v in _row_payload(row).items() if v})
        if page is not None:
            by_names.setdefault(_name_key([*ancestors, url_display_name(path)]), page.url)


def import_rows(store: PageStore, project_id: str, rows: list[ImportRow]) -> ImportStats:
    """Import parsed CSV rows.

    Rows with a Nav I value are placed under the page their Nav names point
    to, matched by name against pages already in the project and rows
    imported before them. Names that match no page get an index page under
    ``/_category/``. Rows without Nav values take their hierarchy from the
    URLs, like ``import_planned_pages``.
    """
    run = _ImportRun(store, project_id)
    url_payloads: dict[str, dict[str, Any]] = {}
    nav_rows: list[tuple[str, ImportRow]] = []
    for row in rows:
        path = normalize_path(row.url)
        if path is None:
            logger.warning("Skipping row with unusable URL {!r}", row.url)
            continue
        if row.nav_i:
            nav_rows.append((path, row))
        else:
            url_payloads[path] = _row_payload(row)

    if url_payloads:
        _import_plan(run, plan_pages_from_urls(url_payloads), url_payloads)
    _import_nav_rows(run, nav_rows)
    return run.finish()
