"""Snapshot builders shared by the unit tests."""
from __future__ import annotations

from decimal import Decimal

from showcase.catalog.domain import Catalog, CatalogItem, CatalogTheme, TemplateVariant


def make_item(item_id="1", name="Latte", price="4.50", **kwargs) -> CatalogItem:
    return CatalogItem(
        id=str(item_id),
        name=name,
        description=kwargs.pop("description", ""),
        price=Decimal(str(price)),
        **kwargs,
    )


def cafe_items() -> tuple[CatalogItem, ...]:
    return (
        make_item(1, "Latte", "4.5", category="Drinks", description="Espresso with steamed milk."),
        make_item(2, "Croissant", "3", category="Bakery", description="Butter pastry."),
    )


def make_catalog(
    catalog_id="cat-1",
    items=None,
    template=TemplateVariant.DEFAULT,
    **kwargs,
) -> Catalog:
    return Catalog(
        id=catalog_id,
        owner_id=kwargs.pop("owner_id", "owner-1"),
        slug=kwargs.pop("slug", "joes-cafe"),
        business_name=kwargs.pop("business_name", "Joe's Cafe"),
        description=kwargs.pop("description", "Coffee and pastries."),
        theme=kwargs.pop("theme", CatalogTheme(template=template)),
        items=cafe_items() if items is None else tuple(items),
        **kwargs,
    )


class DictStore:
    """In-memory stand-in for the visitor's key-value storage."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data = dict(initial or {})
        self.writes = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes += 1
        self.data[key] = value
