"""Tests for domain models."""

import pytest

from site_architect.core.tree.pillars import HOME_GROUP, ROOT_COLOR
from site_architect.models.page import Page, PillarGroup


def test_page_is_frozen() -> None:
    page = Page(id="abc", url="/dogs")
    with pytest.raises(AttributeError):
        page.url = "/cats"  # type: ignore[misc]


def test_page_defaults() -> None:
    page = Page(id="abc", url="/dogs")
    assert (page.position, page.parent_id, page.level, page.icon) == (0, None, 0, None)


def test_home_group() -> None:
    assert HOME_GROUP.is_home
    assert HOME_GROUP.color == ROOT_COLOR
    assert not PillarGroup(pillar_id="svc", index=0, color=ROOT_COLOR).is_home
