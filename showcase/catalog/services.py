"""Database helpers for catalogs and engagement counters."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Mapping

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from .domain import Catalog, CatalogItem, CatalogTheme, EngagementKind
from .models import CatalogItemRecord, CatalogRecord, EngagementCounter

DEMO_CATALOG: dict[str, Any] = {
    "owner_id": "demo-owner",
    "slug": "joes-cafe",
    "business_name": "Joe's Cafe",
    "description": "Neighbourhood coffee, pastries and light bites.",
    "phone_number": "+15551234567",
    "whatsapp_number": "15551234567",
    "address": "12 Market Street, Springfield",
    "theme": {"template": "DEFAULT", "primaryColor": "#B45309", "logoStyle": "circle"},
    "items": (
        {
            "name": "Latte",
            "description": "Double shot espresso with steamed milk.",
            "price": "4.50",
            "category": "Drinks",
        },
        {
            "name": "Croissant",
            "description": "Butter croissant baked every morning.",
            "price": "3.00",
            "category": "Bakery",
        },
    ),
}


def quantize_price(value: Decimal | float | str) -> Decimal:
    """Normalize prices to two decimal places."""

    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, TypeError) as exc:
            raise ValueError("Invalid price value") from exc
    if amount < 0:
        raise ValueError("Prices cannot be negative.")
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def snapshot_from_record(record: CatalogRecord) -> Catalog:
    """Freeze a persisted catalog into the read-only snapshot the storefront uses."""

    items = tuple(
        CatalogItem(
            id=str(item.id),
            name=item.name,
            description=item.description or "",
            price=quantize_price(item.price),
            category=item.category or None,
            image_url=item.image_url or None,
        )
        for item in record.items
    )
    return Catalog(
        id=record.id,
        owner_id=record.owner_id,
        slug=record.slug,
        business_name=record.business_name,
        description=record.description or "",
        theme=CatalogTheme.from_mapping(record.theme),
        items=items,
        logo_url=record.logo_url or None,
        phone_number=record.phone_number or None,
        whatsapp_number=record.whatsapp_number or None,
        address=record.address or None,
    )


def find_catalog_record(catalog_id: str) -> CatalogRecord | None:
    """Return the catalog row regardless of its published state."""

    return db.session.get(CatalogRecord, catalog_id)


def create_catalog(
    *,
    owner_id: str,
    slug: str,
    business_name: str,
    description: str = "",
    items: Iterable[Mapping[str, Any]] = (),
    theme: Mapping[str, Any] | None = None,
    logo_url: str | None = None,
    phone_number: str | None = None,
    whatsapp_number: str | None = None,
    address: str | None = None,
    is_published: bool = True,
) -> CatalogRecord:
    """Persist a catalog with its items in the given order."""

    record = CatalogRecord(
        owner_id=owner_id,
        slug=slug.strip().lower(),
        business_name=business_name.strip(),
        description=description.strip(),
        theme=dict(theme or {}),
        logo_url=logo_url,
        phone_number=phone_number,
        whatsapp_number=whatsapp_number,
        address=address,
        is_published=is_published,
    )
    for position, item in enumerate(items):
        record.items.append(
            CatalogItemRecord(
                position=position,
                name=str(item["name"]).strip(),
                description=str(item.get("description") or "").strip(),
                price=quantize_price(item.get("price", "0")),
                category=item.get("category") or None,
                image_url=item.get("image_url") or item.get("imageUrl") or None,
            )
        )
    db.session.add(record)
    db.session.commit()
    return record


def _bump_counter(catalog_id: str, kind: EngagementKind) -> int:
    return EngagementCounter.query.filter_by(catalog_id=catalog_id, kind=kind.value).update(
        {EngagementCounter.count: EngagementCounter.count + 1},
        synchronize_session=False,
    )


def increment_counter(catalog_id: str, kind: EngagementKind | str) -> None:
    """Add one to the counter, creating it on first use.

    The increment is a single UPDATE so concurrent writers never overwrite
    each other. When two writers race to create the first row, the one that
    loses the unique constraint rolls back and bumps the row the other created.
    """

    kind = EngagementKind(kind)
    if _bump_counter(catalog_id, kind):
        db.session.commit()
        return

    db.session.add(EngagementCounter(catalog_id=catalog_id, kind=kind.value, count=1))
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        _bump_counter(catalog_id, kind)
        db.session.commit()


def fetch_counters(catalog_id: str) -> dict[str, int]:
    """Return every counter for a catalog, defaulting missing kinds to zero."""

    counters = {kind.value: 0 for kind in EngagementKind}
    for counter in EngagementCounter.query.filter_by(catalog_id=catalog_id):
        counters[counter.kind] = counter.count
    return counters


def seed_demo_catalog() -> CatalogRecord:
    """Create the demo catalog once."""

    existing = CatalogRecord.query.filter_by(slug=DEMO_CATALOG["slug"]).first()
    if existing:
        return existing
    return create_catalog(**DEMO_CATALOG)
