"""Tests for icon inheritance."""

from site_architect.core.tree.icons import get_icon_map
from site_architect.models.page import Page


def test_pages_inherit_nearest_ancestor_icon(site_pages: list[Page]) -> None:
    icons = get_icon_map(site_pages)

    assert icons["svc"] == "🛠"
    assert icons["web"] == "🛠"
    assert icons["seo"] == "🛠"
    assert icons["post"] == "📝"


def test_pages_without_icon_in_chain_get_no_entry(site_pages: list[Page]) -> None:
    icons = get_icon_map(site_pages)
    assert "home" not in icons
    assert "blog" not in icons
    assert "about" not in icons


def test_own_icon_wins_over_ancestors() -> None:
    pages = [
        Page(id="a", url="/a", icon="A"),
        Page(id="b", url="/a/b", parent_id="a", icon="B"),
        Page(id="c", url="/a/b/c", parent_id="b"),
    ]
    assert get_icon_map(pages) == {"a": "A", "b": "B", "c": "B"}


def test_child_listed_before_parent_still_inherits() -> None:
    pages = [
        Page(id="c", url="/a/b/c", parent_id="b"),
        Page(id="b", url="/a/b", parent_id="a"),
        Page(id="a", url="/a", icon="A"),
    ]
    assert get_icon_map(pages) == {"c": "A", "b": "A", "a": "A"}


def test_cycle_without_icon_resolves_to_nothing() -> None:
    pages = [
        Page(id="a", url="/a", parent_id="b"),
        Page(id="b", url="/b", parent_id="a"),
    ]
    assert get_icon_map(pages) == {}


def test_cycle_with_icon_inherits_it() -> None:
    pages = [
        Page(id="a", url="/a", parent_id="b", icon="A"),
        Page(id="b", url="/b", parent_id="a"),
    ]
    assert get_icon_map(pages) == {"a": "A", "b": "A"}


def test_deep_chain_resolves_without_recursion() -> None:
    pages = [Page(id="n0", url="/n0", icon="*")]
    pages += [Page(id=f"n{i}", url=f"/n{i}", parent_id=f"n{i - 1}") for i in range(1, 5000)]

    icons = get_icon_map(pages)

    assert len(icons) == 5000
    assert icons["n4999"] == "*"
