"""Shared test fixtures."""

import sqlite3
from collections.abc import Iterator

import pytest
from loguru import logger

from site_architect.core.database.schema import create_schema
from site_architect.core.database.store import PageStore
from site_architect.models.page import Page, Project

# home
# ├── /services (🛠)
# │   ├── /services/web-design
# │   └── /services/seo
# ├── /blog
# │   └── /blog/first-post (📝)
# └── /about
SITE_PAGES = [
    Page(id="home", url="/", position=0, level=0, page_type="Home Page"),
    Page(id="svc", url="/services", position=0, parent_id="home", level=1, icon="🛠"),
    Page(id="web", url="/services/web-design", position=0, parent_id="svc", level=2),
    Page(id="seo", url="/services/seo", position=1, parent_id="svc", level=2),
    Page(id="blog", url="/blog", position=1, parent_id="home", level=1),
    Page(id="post", url="/blog/first-post", position=0, parent_id="blog", level=2, icon="📝"),
    Page(id="about", url="/about", position=2, parent_id="home", level=1),
]


@pytest.fixture
def site_pages() -> list[Page]:
    """Return a small, consistent site with three pillars under a home page."""
    return list(SITE_PAGES)


@pytest.fixture
def store() -> PageStore:
    """Return a PageStore over an empty in-memory DB."""
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    return PageStore(conn)


@pytest.fixture
def project(store: PageStore) -> Project:
    """Return a project populated with a home page, two pillars and one child."""
    proj = store.create_project("Dog Blog", "dogblog.example")
    home = store.create_page(proj.id, "/", level=0, page_type="Home Page")
    food = store.create_page(proj.id, "/food", parent_id=home.id, level=1, icon="🍖")
    store.create_page(proj.id, "/food/puppy", parent_id=food.id, level=2)
    store.create_page(proj.id, "/training", parent_id=home.id, level=1)
    return proj


@pytest.fixture(autouse=True)
def _remove_log_sinks() -> Iterator[None]:
    """Drop loguru sinks after each test; CliRunner closes the streams they write to."""
    yield
    logger.remove()
