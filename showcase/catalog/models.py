"""Database models backing published catalogs and their counters."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import CheckConstraint, UniqueConstraint

from ..extensions import db
from ..models import utcnow


def _new_catalog_id() -> str:
    return uuid4().hex


class CatalogRecord(db.Model):
    """A merchant catalog as persisted by the editor."""

    __tablename__ = "catalog"

    id: str = db.Column(db.String(32), primary_key=True, default=_new_catalog_id)
    owner_id: str = db.Column(db.String(64), nullable=False, index=True)
    slug: str = db.Column(db.String(120), unique=True, nullable=False, index=True)
    business_name: str = db.Column(db.String(160), nullable=False)
    description: str = db.Column(db.Text, nullable=False, default="")
    logo_url: str | None = db.Column(db.String(500))
    phone_number: str | None = db.Column(db.String(32))
    whatsapp_number: str | None = db.Column(db.String(32))
    address: str | None = db.Column(db.String(300))
    theme: dict = db.Column(db.JSON, nullable=False, default=dict)
    is_published: bool = db.Column(db.Boolean, nullable=False, default=True)
    created_at: datetime = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at: datetime = db.Column(
        db.DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    items = db.relationship(
        "CatalogItemRecord",
        backref="catalog",
        order_by="CatalogItemRecord.position",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<CatalogRecord {self.slug}>"


class CatalogItemRecord(db.Model):
    """An item row belonging to a catalog."""

    __tablename__ = "catalog_item"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_catalog_item_price_non_negative"),
    )

    id: int = db.Column(db.Integer, primary_key=True)
    catalog_id: str = db.Column(
        db.String(32), db.ForeignKey("catalog.id"), nullable=False, index=True
    )
    position: int = db.Column(db.Integer, nullable=False, default=0)
    name: str = db.Column(db.String(160), nullable=False)
    description: str = db.Column(db.Text, nullable=False, default="")
    price: Decimal = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    category: str | None = db.Column(db.String(80))
    image_url: str | None = db.Column(db.String(500))


class EngagementCounter(db.Model):
    """Monotonic per-catalog counter for one engagement kind."""

    __tablename__ = "engagement_counter"
    __table_args__ = (
        UniqueConstraint("catalog_id", "kind", name="uq_engagement_counter_catalog_kind"),
        CheckConstraint(
            "kind IN ('views', 'callClicks', 'whatsappClicks', 'directionClicks')",
            name="ck_engagement_counter_kind",
        ),
        CheckConstraint("count >= 0", name="ck_engagement_counter_non_negative"),
    )

    id: int = db.Column(db.Integer, primary_key=True)
    catalog_id: str = db.Column(db.String(32), nullable=False, index=True)
    kind: str = db.Column(db.String(32), nullable=False)
    count: int = db.Column(db.Integer, nullable=False, default=0)
    updated_at: datetime = db.Column(
        db.DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )
