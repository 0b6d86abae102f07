"""Tests for category derivation and item filtering."""

from __future__ import annotations

import pytest

from showcase.catalog.filtering import CatalogFilter, derive_categories, filter_items

from factories import cafe_items, make_catalog, make_item


def test_query_matches_name_case_insensitively():
    result = filter_items(cafe_items(), "lat", None)

    assert [item.id for item in result] == ["1"]


def test_category_without_query_returns_category_items():
    result = filter_items(cafe_items(), "", "Bakery")

    assert [item.id for item in result] == ["2"]


def test_query_matches_description():
    result = filter_items(cafe_items(), "STEAMED", None)

    assert [item.id for item in result] == ["1"]


def test_empty_filters_return_every_item():
    items = cafe_items()

    assert filter_items(items, "", None) == items
    assert filter_items(items, "   ", "") == items


def test_empty_results_are_valid():
    assert filter_items(cafe_items(), "pizza", None) == ()
    assert filter_items((), "", None) == ()


@pytest.mark.parametrize("query", ["", "a", "lat", "butter", "zzz"])
@pytest.mark.parametrize("category", [None, "Drinks", "Bakery", "Missing"])
def test_filter_order_does_not_matter(query, category):
    items = cafe_items() + (make_item(3, "Oat Latte", "5", category="Drinks"),)

    query_first = filter_items(filter_items(items, query, None), "", category)
    category_first = filter_items(filter_items(items, "", category), query, None)

    assert set(query_first) == set(category_first) == set(filter_items(items, query, category))


def test_derive_categories_skips_blank_and_duplicates():
    items = cafe_items() + (
        make_item(3, "Mocha", "5", category="Drinks"),
        make_item(4, "Water", "1", category=""),
        make_item(5, "Gift card", "20"),
    )

    assert set(derive_categories(items)) == {"Drinks", "Bakery"}
    assert len(derive_categories(items)) == 2


def test_catalog_filter_memoizes_per_key():
    catalog = make_catalog()
    item_filter = CatalogFilter(catalog)

    first = item_filter.items("lat", None)
    second = item_filter.items(" lat ", None)

    assert first is second
    assert item_filter.cache_size == 1


def test_catalog_filter_drops_results_when_catalog_changes():
    first_catalog = make_catalog("cat-1")
    second_catalog = make_catalog("cat-2", items=[make_item(9, "Latte Grande", "6")])
    item_filter = CatalogFilter(first_catalog)
    item_filter.items("lat", None)

    item_filter.bind(second_catalog)

    assert item_filter.cache_size == 0
    assert [item.id for item in item_filter.items("lat", None)] == ["9"]
    assert item_filter.categories == ()


def test_catalog_filter_keeps_cache_for_same_catalog():
    catalog = make_catalog()
    item_filter = CatalogFilter(catalog)
    item_filter.items("", "Drinks")

    item_filter.bind(catalog)

    assert item_filter.cache_size == 1


def test_catalog_filter_is_bounded():
    item_filter = CatalogFilter(make_catalog(), max_entries=2)

    for query in ("a", "b", "c"):
        item_filter.items(query, None)

    assert item_filter.cache_size == 2


def test_unbound_filter_returns_nothing():
    assert CatalogFilter().items("lat", None) == ()
