"""Search and category filtering over catalog items."""
from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

from .domain import Catalog, CatalogItem


def normalize_query(query: str | None) -> str:
    return (query or "").strip()


def normalize_category(category: str | None) -> str | None:
    if category is None:
        return None
    return category if category.strip() else None


def derive_categories(items: Iterable[CatalogItem]) -> tuple[str, ...]:
    """Return the distinct, non-empty categories in first-seen order."""

    seen: dict[str, None] = {}
    for item in items:
        if item.category and item.category.strip():
            seen.setdefault(item.category, None)
    return tuple(seen)


def matches_query(item: CatalogItem, query: str | None) -> bool:
    needle = normalize_query(query).casefold()
    if not needle:
        return True
    return needle in item.name.casefold() or needle in (item.description or "").casefold()


def matches_category(item: CatalogItem, active_category: str | None) -> bool:
    active = normalize_category(active_category)
    return active is None or item.category == active


def filter_items(
    items: Iterable[CatalogItem],
    query: str | None = "",
    active_category: str | None = None,
) -> tuple[CatalogItem, ...]:
    """Return the items passing both the query and the category predicate."""

    return tuple(
        item
        for item in items
        if matches_query(item, query) and matches_category(item, active_category)
    )


class CatalogFilter:
    """Memoized facets and filter results for one catalog at a time.

    Results are keyed by ``(catalog id, query, active category)``. Binding a
    different catalog object discards every cached entry.
    """

    def __init__(self, catalog: Catalog | None = None, *, max_entries: int = 128) -> None:
        self._catalog: Catalog | None = None
        self._categories: tuple[str, ...] = ()
        self._results: OrderedDict[tuple[str, str, str | None], tuple[CatalogItem, ...]] = (
            OrderedDict()
        )
        self._max_entries = max_entries
        if catalog is not None:
            self.bind(catalog)

    @property
    def catalog(self) -> Catalog | None:
        return self._catalog

    def bind(self, catalog: Catalog) -> None:
        """Point the filter at ``catalog``, resetting caches if it changed."""

        if catalog is self._catalog:
            return
        self._catalog = catalog
        self._categories = derive_categories(catalog.items)
        self._results.clear()

    @property
    def categories(self) -> tuple[str, ...]:
        return self._categories

    @property
    def cache_size(self) -> int:
        return len(self._results)

    def items(
        self, query: str | None = "", active_category: str | None = None
    ) -> tuple[CatalogItem, ...]:
        """Return the filtered items, computing them at most once per key."""

        if self._catalog is None:
            return ()

        key = (self._catalog.id, normalize_query(query), normalize_category(active_category))
        cached = self._results.get(key)
        if cached is not None:
            self._results.move_to_end(key)
            return cached

        result = filter_items(self._catalog.items, key[1], key[2])
        self._results[key] = result
        if len(self._results) > self._max_entries:
            self._results.popitem(last=False)
        return result
