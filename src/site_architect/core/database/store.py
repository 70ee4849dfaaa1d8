"""SQLite-backed store for projects and their pages."""

import sqlite3
import time
import uuid
from dataclasses import replace
from typing import Any

from loguru import logger

from site_architect.models.page import MAX_LEVEL, FlatItem, Page, Project

_PAGE_COLUMNS = (
    "id, url, position, parent_id, level, icon, user_description, meta_title, "
    "meta_description, keyword, page_type, notes"
)

# Payload columns a caller may set on create/upsert.
PAYLOAD_FIELDS = (
    "icon",
    "user_description",
    "meta_title",
    "meta_description",
    "keyword",
    "page_type",
    "notes",
)

# Fields update_page may change.
EDITABLE_FIELDS = ("url", "parent_id", "position", "level", *PAYLOAD_FIELDS)


def _row_to_page(row: tuple) -> Page:
    return Page(
        id=row[0], url=row[1], position=row[2], parent_id=row[3], level=row[4],
        icon=row[5], user_description=row[6], meta_title=row[7],
        meta_description=row[8], keyword=row[9], page_type=row[10], notes=row[11],
    )


def _now_ms() -> int:
    return int(time.time() * 1000)


def _check_fields(fields: dict[str, Any], allowed: tuple[str, ...]) -> None:
    unknown = set(fields) - set(allowed)
    if unknown:
        msg = f"Unknown page fields: {sorted(unknown)!r}"
        raise ValueError(msg)


def validate_page_fields(url: str, level: int) -> None:
    """Reject URLs not starting with '/' and levels outside 0..MAX_LEVEL."""
    if not url.startswith("/"):
        msg = f"URL must start with '/': {url!r}"
        raise ValueError(msg)
    if not 0 <= level <= MAX_LEVEL:
        msg = f"Level must be between 0 and {MAX_LEVEL}, got {level}"
        raise ValueError(msg)


class PageStore:
    """Projects and pages in one SQLite database (schema must already exist)."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    # --- Projects ---

    def create_project(self, name: str, domain: str, description: str | None = None) -> Project:
        project = Project(id=str(uuid.uuid4()), name=name, domain=domain, description=description)
        try:
            self.conn.execute(
                "INSERT INTO projects (id, name, domain, description, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (project.id, name, domain, description, _now_ms()),
            )
        except sqlite3.IntegrityError as e:
            self.conn.rollback()
            msg = f"A project for domain {domain!r} already exists"
            raise ValueError(msg) from e
        self.conn.commit()
        logger.debug("Created project {} ({})", name, project.id)
        return project

    def list_projects(self) -> list[Project]:
        rows = self.conn.execute(
            "SELECT id, name, domain, description FROM projects ORDER BY name"
        ).fetchall()
        return [Project(id=r[0], name=r[1], domain=r[2], description=r[3]) for r in rows]

    def resolve_project(self, project: str) -> Project | None:
        """Find a project by id, name or domain."""
        row = self.conn.execute(
            "SELECT id, name, domain, description FROM projects "
            "WHERE id = ? OR name = ? OR domain = ?",
            (project, project, project),
        ).fetchone()
        return Project(id=row[0], name=row[1], domain=row[2], description=row[3]) if row else None

    def update_project(
        self,
        project_id: str,
        *,
        name: str | None = None,
        domain: str | None = None,
        description: str | None = None,
    ) -> Project:
        """Change the given project fields; None leaves a field as it is."""
        updates = {
            k: v
            for k, v in (("name", name), ("domain", domain), ("description", description))
            if v is not None
        }
        if updates:
            assignments = ", ".join(f"{k} = ?" for k in updates)
            try:
                cursor = self.conn.execute(
                    f"UPDATE projects SET {assignments} WHERE id = ?",
                    (*updates.values(), project_id),
                )
            except sqlite3.IntegrityError as e:
                self.conn.rollback()
                msg = f"A project for domain {domain!r} already exists"
                raise ValueError(msg) from e
            if cursor.rowcount == 0:
                self.conn.rollback()
                msg = f"Project {project_id!r} not found"
                raise LookupError(msg)
            self.conn.commit()

        project = self.resolve_project(project_id)
        if project is None:
            msg = f"Project {project_id!r} not found"
            raise LookupError(msg)
        return project

    def delete_project(self, project_id: str) -> int:
        """Delete a project with all of its pages. Returns the number of pages removed."""
        try:
            pages = self.conn.execute(
                "DELETE FROM pages WHERE project_id = ?", (project_id,)
            ).rowcount
            cursor = self.conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
            if cursor.rowcount == 0:
                msg = f"Project {project_id!r} not found"
                raise LookupError(msg)
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        logger.debug("Deleted project {} with {} pages", project_id, pages)
        return pages

    # --- Pages ---

    def load_pages(self, project_id: str) -> list[Page]:
        """All pages of a project ordered by position, then id."""
        rows = self.conn.execute(
            f"SELECT {_PAGE_COLUMNS} FROM pages WHERE project_id = ? ORDER BY position, id",
            (project_id,),
        ).fetchall()
        return [_row_to_page(r) for r in rows]

    def get_page(self, project_id: str, page_id: str) -> Page | None:
        row = self.conn.execute(
            f"SELECT {_PAGE_COLUMNS} FROM pages WHERE project_id = ? AND id = ?",
            (project_id, page_id),
        ).fetchone()
        return _row_to_page(row) if row else None

    def find_page_by_url(self, project_id: str, url: str) -> Page | None:
        row = self.conn.execute(
            f"SELECT {_PAGE_COLUMNS} FROM pages WHERE project_id = ? AND url = ?",
            (project_id, url),
        ).fetchone()
        return _row_to_page(row) if row else None

    def next_position(self, project_id: str, parent_id: str | None = None) -> int:
        """Position just past the last child of ``parent_id`` (None = root list)."""
        row = self.conn.execute(
            "SELECT MAX(position) FROM pages WHERE project_id = ? AND parent_id IS ?",
            (project_id, parent_id),
        ).fetchone()
        return (row[0] if row[0] is not None else -1) + 1

    def create_page(
        self,
        project_id: str,
        url: str,
        *,
        parent_id: str | None = None,
        position: int | None = None,
        level: int = 0,
        **payload: Any,
    ) -> Page:
        """Insert a page, appending it after its siblings when no position is given."""
        validate_page_fields(url, level)
        _check_fields(payload, PAYLOAD_FIELDS)
        if position is None:
            position = self.next_position(project_id, parent_id)

        page = Page(
            id=str(uuid.uuid4()), url=url, position=position, parent_id=parent_id,
            level=level, **payload,
        )
        now = _now_ms()
        try:
            self.conn.execute(
                f"INSERT INTO pages ({_PAGE_COLUMNS}, project_id, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    page.id, page.url, page.position, page.parent_id, page.level, page.icon,
                    page.user_description, page.meta_title, page.meta_description,
                    page.keyword, page.page_type, page.notes, project_id, now, now,
                ),
            )
        except sqlite3.IntegrityError as e:
            self.conn.rollback()
            msg = f"A page with URL {url!r} already exists"
            raise ValueError(msg) from e
        self.conn.commit()
        return page

    def upsert_page(
        self,
        project_id: str,
        url: str,
        *,
        parent_id: str | None = None,
        level: int = 0,
        **payload: Any,
    ) -> tuple[Page, bool]:
        """Create a page or update the one with the same URL.

        Updates keep the existing position and only overwrite payload fields
        that are given (not None). Returns the page and whether it was created.
        """
        existing = self.find_page_by_url(project_id, url)
        if existing is None:
            return self.create_page(
                project_id, url, parent_id=parent_id, level=level, **payload
            ), True

        validate_page_fields(url, level)
        _check_fields(payload, PAYLOAD_FIELDS)
        updates = {k: v for k, v in payload.items() if v is not None}
        updates["parent_id"] = parent_id
        updates["level"] = level
        assignments = ", ".join(f"{k} = ?" for k in updates)
        self.conn.execute(
            f"UPDATE pages SET {assignments}, updated_at = ? WHERE project_id = ? AND id = ?",
            (*updates.values(), _now_ms(), project_id, existing.id),
        )
        self.conn.commit()
        return replace(existing, **updates), False

    def update_page(self, project_id: str, page_id: str, **fields: Any) -> Page:
        """Set the given fields of one page.

        Unlike ``upsert_page`` a None value is written, so payload fields,
        ``icon`` and ``parent_id`` can be cleared. ``url`` and ``level`` are
        validated like on create. Children are not touched; use a move to
        carry a subtree along.
        """
        _check_fields(fields, EDITABLE_FIELDS)
        existing = self.get_page(project_id, page_id)
        if existing is None:
            msg = f"Page {page_id!r} not found"
            raise LookupError(msg)
        if not fields:
            return existing

        page = replace(existing, **fields)
        if page.url is None or page.level is None or page.position is None:
            msg = "url, level and position cannot be cleared"
            raise ValueError(msg)
        validate_page_fields(page.url, page.level)
        if page.parent_id == page.id:
            msg = f"Page {page_id!r} cannot be its own parent"
            raise ValueError(msg)

        assignments = ", ".join(f"{k} = ?" for k in fields)
        try:
            self.conn.execute(
                f"UPDATE pages SET {assignments}, updated_at = ? WHERE project_id = ? AND id = ?",
                (*fields.values(), _now_ms(), project_id, page_id),
            )
        except sqlite3.IntegrityError as e:
            self.conn.rollback()
            msg = f"A page with URL {page.url!r} already exists"
            raise ValueError(msg) from e
        self.conn.commit()
        return page

    def delete_page(self, project_id: str, page_id: str) -> None:
        """Delete one page. Its children keep their now-dangling parent_id."""
        cursor = self.conn.execute(
            "DELETE FROM pages WHERE project_id = ? AND id = ?", (project_id, page_id)
        )
        if cursor.rowcount == 0:
            self.conn.rollback()
            msg = f"Page {page_id!r} not found"
            raise LookupError(msg)
        self.conn.commit()

    def apply_reorder(self, project_id: str, items: list[FlatItem]) -> None:
        """Write parent, position, URL and level of every item in one transaction."""
        if not items:
            msg = "Nothing to reorder"
            raise ValueError(msg)

        try:
            # Park changed URLs on unique placeholders first so that swapping
            # two URLs never trips the (project_id, url) constraint midway.
            for item in items:
                self.conn.execute(
                    "UPDATE pages SET url = ? WHERE project_id = ? AND id = ? AND url != ?",
                    (f"\0{item.id}", project_id, item.id, item.url),
                )
            now = _now_ms()
            for item in items:
                cursor = self.conn.execute(
                    "UPDATE pages SET parent_id = ?, position = ?, url = ?, level = ?, "
                    "updated_at = ? WHERE project_id = ? AND id = ?",
                    (item.parent_id, item.position, item.url, item.level, now, project_id, item.id),
                )
                if cursor.rowcount == 0:
                    msg = f"Page {item.id!r} not found in project {project_id!r}"
                    raise LookupError(msg)
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        logger.debug("Applied reorder of {} pages in project {}", len(items), project_id)
