"""Tests for converting flat page collections to trees and back."""

from site_architect.core.tree.builder import (
    effective_parent_ids,
    find_node,
    flat_to_tree,
    tree_to_flat,
    tree_to_pages,
)
from site_architect.models.page import FlatItem, Page


def test_flat_to_tree_nests_children_and_sorts_by_position(site_pages: list[Page]) -> None:
    tree = flat_to_tree(list(reversed(site_pages)))

    assert [n.id for n in tree] == ["home"]
    home = tree[0]
    assert [c.id for c in home.children] == ["svc", "blog", "about"]
    assert [c.id for c in home.children[0].children] == ["web", "seo"]
    assert home.children[0].name == "/services"


def test_orphans_become_roots() -> None:
    pages = [
        Page(id="a", url="/a", position=1),
        Page(id="b", url="/a/b", position=0, parent_id="deleted"),
        Page(id="c", url="/a/b/c", position=0, parent_id="b"),
    ]
    tree = flat_to_tree(pages)

    assert [n.id for n in tree] == ["b", "a"]
    assert [c.id for c in tree[0].children] == ["c"]


def test_parent_cycle_does_not_hang_and_keeps_every_page() -> None:
    pages = [
        Page(id="a", url="/a", position=0, parent_id="b"),
        Page(id="b", url="/b", position=1, parent_id="a"),
        Page(id="c", url="/a/c", position=0, parent_id="a"),
        Page(id="self", url="/self", position=2, parent_id="self"),
    ]
    tree = flat_to_tree(pages)

    assert [n.id for n in tree] == ["a", "b", "self"]
    assert [c.id for c in tree[0].children] == ["c"]
    assert {item.id for item in tree_to_flat(tree)} == {"a", "b", "c", "self"}


def test_effective_parent_ids_drops_missing_and_cyclic_parents() -> None:
    pages = [
        Page(id="a", url="/a", parent_id="a"),
        Page(id="b", url="/b", parent_id="gone"),
        Page(id="c", url="/b/c", parent_id="b"),
    ]
    assert effective_parent_ids(pages) == {"a": None, "b": None, "c": "b"}


def test_tree_to_flat_renumbers_positions_per_parent() -> None:
    pages = [
        Page(id="root", url="/", position=7),
        Page(id="x", url="/x", position=20, parent_id="root"),
        Page(id="y", url="/y", position=5, parent_id="root"),
        Page(id="z", url="/z", position=10, parent_id="root"),
    ]
    flat = tree_to_flat(flat_to_tree(pages))

    assert flat == [
        FlatItem(id="root", parent_id=None, position=0, url="/", level=0),
        FlatItem(id="y", parent_id="root", position=0, url="/y", level=1),
        FlatItem(id="z", parent_id="root", position=1, url="/z", level=1),
        FlatItem(id="x", parent_id="root", position=2, url="/x", level=1),
    ]


def test_flatten_is_pre_order(site_pages: list[Page]) -> None:
    flat = tree_to_flat(flat_to_tree(site_pages))
    assert [i.id for i in flat] == ["home", "svc", "web", "seo", "blog", "post", "about"]


def test_round_trip_is_a_fixed_point(site_pages: list[Page]) -> None:
    shuffled = [
        Page(id=p.id, url=p.url, position=p.position * 10 + 3, parent_id=p.parent_id)
        for p in site_pages
    ]
    once = tree_to_flat(flat_to_tree(shuffled))
    twice = tree_to_flat(flat_to_tree(tree_to_pages(flat_to_tree(shuffled))))
    assert once == twice


def test_levels_follow_depth_and_are_capped() -> None:
    pages = [Page(id="p0", url="/p0")]
    for i in range(1, 6):
        pages.append(Page(id=f"p{i}", url=f"/p{i}", parent_id=f"p{i - 1}"))

    levels = [item.level for item in tree_to_flat(flat_to_tree(pages))]
    assert levels == [0, 1, 2, 3, 3, 3]
    assert [p.level for p in tree_to_pages(flat_to_tree(pages))] == levels


def test_tree_to_pages_keeps_payload(site_pages: list[Page]) -> None:
    pages = tree_to_pages(flat_to_tree(site_pages))
    by_id = {p.id: p for p in pages}
    assert by_id["svc"].icon == "🛠"
    assert by_id["home"].page_type == "Home Page"


def test_find_node_returns_depth(site_pages: list[Page]) -> None:
    tree = flat_to_tree(site_pages)

    node, depth = find_node(tree, "post")
    assert node is not None
    assert node.data.url == "/blog/first-post"
    assert depth == 2
    assert find_node(tree, "nope") == (None, None)


def test_empty_collection_builds_empty_tree() -> None:
    assert flat_to_tree([]) == ()
    assert tree_to_flat(()) == []
