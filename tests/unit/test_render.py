"""Tests for the text outline of page trees."""

from site_architect.core.tree.render import render_tree_as_text
from site_architect.models.page import Page


def test_render_shows_hierarchy_icons_and_pillars(site_pages: list[Page]) -> None:
    text = render_tree_as_text(site_pages)
    lines = text.splitlines()

    assert lines[0] == "- /  [home]"
    assert lines[1] == "    - 🛠 /services  [pillar:1]"
    assert lines[2] == "        - 🛠 /services/web-design  [pillar:1]"
    assert "    - /blog  [pillar:2]" in lines
    assert "        - 📝 /blog/first-post  [pillar:2]" in lines
    assert len(lines) == len(site_pages)


def test_render_with_depth_limit_summarises_hidden_pages(site_pages: list[Page]) -> None:
    text = render_tree_as_text(site_pages, max_depth=1)

    assert "/services/web-design" not in text
    assert "    - 🛠 /services  [pillar:1]\n        - ... (2 more pages)\n" in text
    assert "        - ... (1 more page)\n" in text


def test_render_can_show_ids_and_titles() -> None:
    pages = [Page(id="h1", url="/", meta_title="Home")]
    assert render_tree_as_text(pages, show_ids=True) == "- /  Home  [home]  id=h1\n"
