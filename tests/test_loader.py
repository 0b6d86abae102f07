"""Tests for catalog lookup against the database."""

from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from showcase.catalog import loader as loader_module
from showcase.catalog.domain import TemplateVariant
from showcase.catalog.loader import NOT_FOUND, CatalogLoader, CatalogNetworkError, LookupKey
from showcase.catalog.services import create_catalog, seed_demo_catalog


def test_lookup_by_slug_and_id_return_same_snapshot(app, cafe_id):
    with app.app_context():
        by_slug = CatalogLoader().get_catalog_by_slug("Joes-Cafe")
        by_id = CatalogLoader().get_catalog_by_id(cafe_id)

    assert by_slug == by_id
    assert by_slug.id == cafe_id
    assert by_slug.template is TemplateVariant.MINIMALIST
    assert [item.name for item in by_slug.items] == ["Latte", "Croissant"]
    assert by_slug.items[0].price == Decimal("4.50")


def test_load_dispatches_on_lookup_key(app, cafe_id):
    with app.app_context():
        catalog_loader = CatalogLoader()
        assert catalog_loader.load(LookupKey(catalog_id=cafe_id)).id == cafe_id
        assert catalog_loader.load(LookupKey(slug="joes-cafe")).id == cafe_id
        assert catalog_loader.load(LookupKey(slug="joes-cafe", catalog_id="nope")) is NOT_FOUND
        assert catalog_loader.load(LookupKey()) is NOT_FOUND


def test_unpublished_and_missing_catalogs_are_not_found(app):
    with app.app_context():
        create_catalog(owner_id="o", slug="draft", business_name="Draft", is_published=False)

        assert CatalogLoader().get_catalog_by_slug("draft") is NOT_FOUND
        assert CatalogLoader().get_catalog_by_slug("joes-cafe") is NOT_FOUND
        assert not NOT_FOUND


def test_database_failures_raise_network_error(app, cafe_id, monkeypatch):
    def broken(record):
        raise SQLAlchemyError("connection reset")

    monkeypatch.setattr(loader_module, "snapshot_from_record", broken)

    with app.app_context(), pytest.raises(CatalogNetworkError):
        CatalogLoader().get_catalog_by_id(cafe_id)


def test_network_error_renders_same_unavailable_page(client, cafe_id, monkeypatch):
    def broken(record):
        raise SQLAlchemyError("connection reset")

    monkeypatch.setattr(loader_module, "snapshot_from_record", broken)

    response = client.get("/view/joes-cafe")

    assert response.status_code == 404
    assert b"Catalog Not Available" in response.data


def test_negative_prices_are_rejected(app):
    with app.app_context(), pytest.raises(ValueError):
        create_catalog(
            owner_id="o",
            slug="bad",
            business_name="Bad",
            items=[{"name": "Refund", "price": "-1"}],
        )


def test_seed_demo_catalog_is_idempotent(app):
    with app.app_context():
        first = seed_demo_catalog().id
        second = seed_demo_catalog().id
        catalog = CatalogLoader().get_catalog_by_slug("joes-cafe")

    assert first == second == catalog.id
    assert catalog.phone_number == "+15551234567"
