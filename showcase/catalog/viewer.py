"""Single-item detail modal state."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .domain import Catalog, CatalogItem


@dataclass(frozen=True)
class Closed:
    """No item detail is visible."""


@dataclass(frozen=True)
class Open:
    """The detail modal shows ``item``."""

    item: CatalogItem


ViewerState = Union[Closed, Open]

CLOSED = Closed()


class ItemDetailViewer:
    """At most one item is open; selecting another replaces it directly."""

    def __init__(self) -> None:
        self._state: ViewerState = CLOSED

    @property
    def state(self) -> ViewerState:
        return self._state

    @property
    def is_open(self) -> bool:
        return isinstance(self._state, Open)

    @property
    def item(self) -> CatalogItem | None:
        if isinstance(self._state, Open):
            return self._state.item
        return None

    def select(self, item: CatalogItem) -> ViewerState:
        self._state = Open(item)
        return self._state

    def select_by_id(self, catalog: Catalog, item_id: str | None) -> CatalogItem | None:
        """Open the item with ``item_id``; unknown ids leave the state untouched."""

        if not item_id:
            return None
        item = catalog.find_item(item_id)
        if item is not None:
            self.select(item)
        return item

    def dismiss(self) -> ViewerState:
        """Close the modal (overlay click or close control)."""

        self._state = CLOSED
        return self._state

    def complete_cta(self) -> ViewerState:
        """Close the modal once its call-to-action ran."""

        return self.dismiss()
