"""Catalog lookup by slug or id."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from .domain import Catalog
from .models import CatalogRecord
from .services import snapshot_from_record


class CatalogNotFound(Enum):
    """Result returned when no published catalog matches the lookup."""

    NOT_FOUND = "not_found"

    def __bool__(self) -> bool:
        return False


NOT_FOUND = CatalogNotFound.NOT_FOUND

LoadResult = Union[Catalog, CatalogNotFound]


class CatalogNetworkError(RuntimeError):
    """Raised when the catalog backend cannot be reached."""


@dataclass(frozen=True)
class LookupKey:
    """Identifiers taken from the route; exactly one of them drives the fetch."""

    slug: str | None = None
    catalog_id: str | None = None

    @property
    def strategy(self) -> Literal["id", "slug"] | None:
        if self.catalog_id:
            return "id"
        if self.slug:
            return "slug"
        return None

    def describe(self) -> str:
        if self.strategy == "id":
            return f"id={self.catalog_id}"
        if self.strategy == "slug":
            return f"slug={self.slug}"
        return "no identifier"


class CatalogLoader:
    """Fetch published catalogs from the database as snapshots."""

    def get_catalog_by_slug(self, slug: str) -> LoadResult:
        return self._fetch(slug=slug.strip().lower())

    def get_catalog_by_id(self, catalog_id: str) -> LoadResult:
        return self._fetch(id=catalog_id)

    def load(self, key: LookupKey) -> LoadResult:
        """Dispatch to the single strategy selected by ``key``."""

        if key.strategy == "id":
            return self.get_catalog_by_id(key.catalog_id)
        if key.strategy == "slug":
            return self.get_catalog_by_slug(key.slug)
        return NOT_FOUND

    def _fetch(self, **criteria: str) -> LoadResult:
        try:
            record = CatalogRecord.query.filter_by(**criteria).first()
            if record is None or not record.is_published:
                return NOT_FOUND
            return snapshot_from_record(record)
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise CatalogNetworkError("Catalog lookup failed.") from exc
