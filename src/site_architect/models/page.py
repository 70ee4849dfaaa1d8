"""Domain models for site architecture trees."""

from dataclasses import dataclass

# Deepest level a page can report, even when nested further.
MAX_LEVEL = 3


@dataclass(frozen=True)
class Project:
    """A site whose pages are planned together."""

    id: str
    name: str
    domain: str
    description: str | None = None


@dataclass(frozen=True)
class Page:
    """A single page in a site architecture."""

    id: str
    url: str
    position: int = 0
    parent_id: str | None = None
    level: int = 0
    icon: str | None = None
    user_description: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    keyword: str | None = None
    page_type: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class TreeNode:
    """A page placed in a nested tree. ``name`` mirrors the page URL."""

    id: str
    name: str
    data: Page
    children: tuple["TreeNode", ...] = ()


@dataclass(frozen=True)
class FlatItem:
    """Structural fields of one page, as written back after a tree edit."""

    id: str
    parent_id: str | None
    position: int
    url: str
    level: int


@dataclass(frozen=True)
class PillarColor:
    """Visual classes for a pillar cluster."""

    badge: str
    border: str
    bg: str


@dataclass(frozen=True)
class PillarGroup:
    """The cluster a page belongs to.

    ``pillar_id`` is None for the home group shared by root pages.
    """

    pillar_id: str | None
    index: int
    color: PillarColor

    @property
    def is_home(self) -> bool:
        return self.pillar_id is None


@dataclass(frozen=True)
class NavPage:
    """A page with breadcrumb-style navigation names derived from its ancestors."""

    page: Page
    nav_i: str | None
    nav_ii: str | None
    nav_iii: str | None


@dataclass(frozen=True)
class ImportRow:
    """One parsed row of a CSV import."""

    url: str
    user_description: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    keyword: str | None = None
    page_type: str | None = None
    icon: str | None = None
    level: int | None = None
    nav_i: str | None = None
    nav_ii: str | None = None
    nav_iii: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class PlannedPage:
    """A page to be created, with its parent addressed by URL."""

    url: str
    parent_url: str | None
    level: int
    meta_title: str | None = None
    page_type: str | None = None
