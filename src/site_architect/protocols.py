"""Protocols for dependency injection in the tree editor."""

from typing import Protocol, runtime_checkable

from site_architect.models.page import FlatItem


@runtime_checkable
class PageStoreProtocol(Protocol):
    """Protocol for stores that persist structural edits."""

    def apply_reorder(self, project_id: str, items: list[FlatItem]) -> None:
        """Write parent, position, URL and level for every item as one unit.

        Raises on failure; nothing is applied in that case.
        """
        ...
