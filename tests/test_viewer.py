"""Tests for the item detail modal state machine."""

from __future__ import annotations

from showcase.catalog.viewer import CLOSED, ItemDetailViewer, Open

from factories import make_catalog


def test_viewer_starts_closed():
    viewer = ItemDetailViewer()

    assert viewer.state == CLOSED
    assert viewer.item is None
    assert not viewer.is_open


def test_select_then_dismiss():
    catalog = make_catalog()
    viewer = ItemDetailViewer()

    viewer.select(catalog.items[0])
    assert viewer.state == Open(catalog.items[0])

    viewer.dismiss()
    assert viewer.state == CLOSED


def test_selecting_another_item_replaces_the_open_one():
    catalog = make_catalog()
    viewer = ItemDetailViewer()

    viewer.select(catalog.items[0])
    viewer.select(catalog.items[1])

    assert viewer.item == catalog.items[1]
    assert viewer.is_open


def test_completing_the_cta_closes_the_modal():
    catalog = make_catalog()
    viewer = ItemDetailViewer()
    viewer.select(catalog.items[0])

    viewer.complete_cta()

    assert not viewer.is_open


def test_select_by_id_ignores_unknown_items():
    catalog = make_catalog()
    viewer = ItemDetailViewer()
    viewer.select_by_id(catalog, "2")

    assert viewer.select_by_id(catalog, "999") is None
    assert viewer.select_by_id(catalog, None) is None
    assert viewer.item.id == "2"
