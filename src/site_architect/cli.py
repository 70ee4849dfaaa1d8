"""CLI for site-architect (projects, pages, tree moves, import/export)."""

import sqlite3
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from site_architect.config import DB_FILENAME, resolve_data_directory
from site_architect.core.database.schema import migrate_schema
from site_architect.core.database.store import PageStore
from site_architect.core.editor import TreeEditor
from site_architect.core.export.csv_writer import pages_to_csv
from site_architect.core.export.sitemap import pages_to_sitemap_xml
from site_architect.core.importer.csv_reader import parse_csv
from site_architect.core.importer.loader import import_planned_pages, import_rows
from site_architect.core.importer.url_hierarchy import plan_pages_from_urls
from site_architect.core.tree.builder import flat_to_tree, tree_to_pages
from site_architect.core.tree.render import render_tree_as_text
from site_architect.logging_config import configure_logging
from site_architect.models.page import MAX_LEVEL, Page, Project

app = typer.Typer(help="Site architect: plan and reshape site page hierarchies.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Database directory"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _open_db(data_dir: Path | None, *, create: bool = False) -> sqlite3.Connection:
    """Open the database, creating it only when asked to."""
    dst = data_dir or resolve_data_directory()
    db_path = dst / DB_FILENAME
    if not db_path.exists() and not create:
        logger.error("Database not found: {}. Run 'init' first.", db_path)
        raise typer.Exit(1)
    dst.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    migrate_schema(conn)
    return conn


def _resolve_project(store: PageStore, project: str) -> Project:
    found = store.resolve_project(project)
    if found is None:
        typer.echo(f"Project '{project}' not found.")
        raise typer.Exit(1)
    return found


def _resolve_page(pages: list[Page], ref: str) -> Page:
    """Find a page by id or URL."""
    for page in pages:
        if page.id == ref or page.url == ref:
            return page
    typer.echo(f"Page '{ref}' not found.")
    raise typer.Exit(1)


@app.command()
def init(
    name: str = typer.Argument(..., help="Project name"),
    domain: str = typer.Argument(..., help="Site domain, e.g. example.com"),
    description: Annotated[
        str | None, typer.Option("--description", help="Project description")
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Create a project (and the database if needed)."""
    conn = _open_db(data_dir, create=True)
    try:
        store = PageStore(conn)
        try:
            project = store.create_project(name, domain, description)
        except ValueError as e:
            logger.error("{}", e)
            raise typer.Exit(1) from e
        typer.echo(f"Created project {project.name} ({project.domain})  [id={project.id}]")
    finally:
        conn.close()


@app.command()
def projects(data_dir: DataDirOption = None) -> None:
    """List all projects."""
    conn = _open_db(data_dir)
    try:
        store = PageStore(conn)
        rows = store.list_projects()
        typer.echo(f"{len(rows)} projects:\n")
        for project in rows:
            count = len(store.load_pages(project.id))
            typer.echo(f"  {project.name} ({project.domain}) - {count} pages  [id={project.id}]")
    finally:
        conn.close()


@app.command()
def add(
    project: str = typer.Argument(..., help="Project name, domain or id"),
    url: str = typer.Argument(..., help="Page URL path, e.g. /services"),
    parent: Annotated[
        str | None, typer.Option("--parent", "-p", help="Parent page URL or id")
    ] = None,
    title: Annotated[str | None, typer.Option("--title", "-t", help="Meta title")] = None,
    icon: Annotated[str | None, typer.Option("--icon", help="Icon for this page")] = None,
    page_type: Annotated[str | None, typer.Option("--type", help="Page type")] = None,
    keyword: Annotated[str | None, typer.Option("--keyword", "-k", help="Target keyword")] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Add a page at the end of its parent's children."""
    conn = _open_db(data_dir)
    try:
        store = PageStore(conn)
        proj = _resolve_project(store, project)
        pages = tree_to_pages(flat_to_tree(store.load_pages(proj.id)))
        parent_page = _resolve_page(pages, parent) if parent else None
        level = min(parent_page.level + 1, MAX_LEVEL) if parent_page else 0
        try:
            page = store.create_page(
                proj.id,
                url,
                parent_id=parent_page.id if parent_page else None,
                level=level,
                meta_title=title,
                icon=icon,
                page_type=page_type,
                keyword=keyword,
            )
        except ValueError as e:
            logger.error("{}", e)
            raise typer.Exit(1) from e
        typer.echo(f"Added {page.url}  [id={page.id}]")
    finally:
        conn.close()


@app.command()
def delete(
    project: str = typer.Argument(..., help="Project name, domain or id"),
    page: str = typer.Argument(..., help="Page URL or id"),
    data_dir: DataDirOption = None,
) -> None:
    """Delete a page. Its children are shown at the root afterwards."""
    conn = _open_db(data_dir)
    try:
        store = PageStore(conn)
        proj = _resolve_project(store, project)
        target = _resolve_page(store.load_pages(proj.id), page)
        store.delete_page(proj.id, target.id)
        typer.echo(f"Deleted {target.url}")
    finally:
        conn.close()


@app.command()
def edit(
    project: str = typer.Argument(..., help="Project name, domain or id"),
    page: str = typer.Argument(..., help="Page URL or id"),
    url: Annotated[str | None, typer.Option("--url", help="New URL (children keep theirs)")] = None,
    title: Annotated[str | None, typer.Option("--title", "-t", help="Meta title")] = None,
    meta_description: Annotated[
        str | None, typer.Option("--meta-description", help="Meta description")
    ] = None,
    keyword: Annotated[str | None, typer.Option("--keyword", "-k", help="Target keyword")] = None,
    page_type: Annotated[str | None, typer.Option("--type", help="Page type")] = None,
    icon: Annotated[str | None, typer.Option("--icon", help="Icon for this page")] = None,
    clear_icon: bool = typer.Option(False, "--clear-icon", help="Remove the page's own icon"),
    description: Annotated[
        str | None, typer.Option("--description", help="Page description")
    ] = None,
    notes: Annotated[str | None, typer.Option("--notes", help="Notes")] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Change a page's URL or details. Use 'move' to change its place in the tree."""
    if icon is not None and clear_icon:
        typer.echo("Use either --icon or --clear-icon, not both.")
        raise typer.Exit(1)

    fields = {
        k: v
        for k, v in (
            ("url", url),
            ("meta_title", title),
            ("meta_description", meta_description),
            ("keyword", keyword),
            ("page_type", page_type),
            ("icon", icon),
            ("user_description", description),
            ("notes", notes),
        )
        if v is not None
    }
    if clear_icon:
        fields["icon"] = None
    if not fields:
        typer.echo("Nothing to change.")
        raise typer.Exit(1)

    conn = _open_db(data_dir)
    try:
        store = PageStore(conn)
        proj = _resolve_project(store, project)
        target = _resolve_page(store.load_pages(proj.id), page)
        try:
            updated = store.update_page(proj.id, target.id, **fields)
        except ValueError as e:
            logger.error("{}", e)
            raise typer.Exit(1) from e
        typer.echo(f"Updated {updated.url}  [id={updated.id}]")
    finally:
        conn.close()


@app.command(name="rename-project")
def rename_project(
    project: str = typer.Argument(..., help="Project name, domain or id"),
    name: Annotated[str | None, typer.Option("--name", "-n", help="New name")] = None,
    domain: Annotated[str | None, typer.Option("--domain", help="New domain")] = None,
    description: Annotated[
        str | None, typer.Option("--description", help="New description")
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Change a project's name, domain or description."""
    if name is None and domain is None and description is None:
        typer.echo("Nothing to change.")
        raise typer.Exit(1)

    conn = _open_db(data_dir)
    try:
        store = PageStore(conn)
        proj = _resolve_project(store, project)
        try:
            updated = store.update_project(
                proj.id, name=name, domain=domain, description=description
            )
        except ValueError as e:
            logger.error("{}", e)
            raise typer.Exit(1) from e
        typer.echo(f"Updated project {updated.name} ({updated.domain})  [id={updated.id}]")
    finally:
        conn.close()


@app.command(name="delete-project")
def delete_project(
    project: str = typer.Argument(..., help="Project name, domain or id"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    data_dir: DataDirOption = None,
) -> None:
    """Delete a project and all of its pages."""
    conn = _open_db(data_dir)
    try:
        store = PageStore(conn)
        proj = _resolve_project(store, project)
        if not yes:
            typer.confirm(f"Delete project {proj.name} and all its pages?", abort=True)
        removed = store.delete_project(proj.id)
        typer.echo(f"Deleted project {proj.name} ({removed} pages)")
    finally:
        conn.close()


@app.command()
def show(
    project: str = typer.Argument(..., help="Project name, domain or id"),
    max_depth: Annotated[
        int | None, typer.Option("--max-depth", "-m", help="Max depth levels to render")
    ] = None,
    ids: bool = typer.Option(False, "--ids", help="Show page ids"),
    data_dir: DataDirOption = None,
) -> None:
    """Show a project's page tree."""
    conn = _open_db(data_dir)
    try:
        store = PageStore(conn)
        proj = _resolve_project(store, project)
        pages = store.load_pages(proj.id)
        if not pages:
            typer.echo(f"Project '{proj.name}' has no pages.")
            return
        typer.echo(render_tree_as_text(pages, max_depth=max_depth, show_ids=ids), nl=False)
    finally:
        conn.close()


@app.command()
def move(
    project: str = typer.Argument(..., help="Project name, domain or id"),
    pages: list[str] = typer.Argument(..., help="Page URLs or ids to move"),
    parent: Annotated[
        str | None,
        typer.Option("--parent", "-p", help="New parent URL or id (omit for top level)"),
    ] = None,
    index: int = typer.Option(0, "--index", "-i", help="Position among the new siblings"),
    data_dir: DataDirOption = None,
) -> None:
    """Move pages (with their subtrees) under a new parent, rewriting their URLs.

    The move is saved at once; there is no undo across invocations.
    """
    conn = _open_db(data_dir)
    try:
        store = PageStore(conn)
        proj = _resolve_project(store, project)
        current = store.load_pages(proj.id)
        node_ids = [_resolve_page(current, ref).id for ref in pages]
        parent_id = _resolve_page(current, parent).id if parent else None

        editor = TreeEditor(store, proj.id, current, optimistic=False)
        try:
            moved = editor.move(node_ids, parent_id, index)
        except Exception as e:
            logger.error("Failed to save move: {}", e)
            raise typer.Exit(1) from e
        if not moved:
            typer.echo("Move declined: the target is inside the moved pages.")
            raise typer.Exit(1)
        typer.echo(render_tree_as_text(editor.pages), nl=False)
    finally:
        conn.close()


@app.command(name="import-csv")
def import_csv(
    project: str = typer.Argument(..., help="Project name, domain or id"),
    csv_file: Path = typer.Argument(..., help="CSV file with a header row"),
    data_dir: DataDirOption = None,
) -> None:
    """Import pages from CSV; the hierarchy is derived from the URLs."""
    if not csv_file.exists():
        logger.error("CSV file not found: {}", csv_file)
        raise typer.Exit(1)
    rows = parse_csv(csv_file.read_text(encoding="utf-8"))
    if not rows:
        typer.echo("No valid rows found. The header row must map a column to URL.")
        raise typer.Exit(1)

    conn = _open_db(data_dir)
    try:
        store = PageStore(conn)
        proj = _resolve_project(store, project)
        stats = import_rows(store, proj.id, rows)
        typer.echo(
            f"Imported {stats.created} pages, updated {stats.updated}, errors {stats.errors}"
        )
    finally:
        conn.close()


@app.command(name="import-urls")
def import_urls(
    project: str = typer.Argument(..., help="Project name, domain or id"),
    url_file: Path = typer.Argument(..., help="File with one URL or path per line"),
    data_dir: DataDirOption = None,
) -> None:
    """Import a URL list, adding implicit parent pages."""
    if not url_file.exists():
        logger.error("URL file not found: {}", url_file)
        raise typer.Exit(1)
    plan = plan_pages_from_urls(url_file.read_text(encoding="utf-8").splitlines())
    if not plan:
        typer.echo("No URLs found.")
        raise typer.Exit(1)

    conn = _open_db(data_dir)
    try:
        store = PageStore(conn)
        proj = _resolve_project(store, project)
        stats = import_planned_pages(store, proj.id, plan)
        typer.echo(
            f"Imported {stats.created} pages, updated {stats.updated}, errors {stats.errors}"
        )
    finally:
        conn.close()


@app.command()
def export(
    project: str = typer.Argument(..., help="Project name, domain or id"),
    fmt: str = typer.Option("csv", "--format", "-f", help="csv or xml"),
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write to file instead of stdout")
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Export a project's pages as CSV or an XML sitemap."""
    if fmt not in ("csv", "xml"):
        typer.echo(f"Unknown format '{fmt}'. Use csv or xml.")
        raise typer.Exit(1)

    conn = _open_db(data_dir)
    try:
        store = PageStore(conn)
        proj = _resolve_project(store, project)
        pages = tree_to_pages(flat_to_tree(store.load_pages(proj.id)))
        text = pages_to_csv(pages) if fmt == "csv" else pages_to_sitemap_xml(pages, proj.domain)
    finally:
        conn.close()

    if output:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"Wrote {len(pages)} pages to {output}")
    else:
        typer.echo(text, nl=False)
