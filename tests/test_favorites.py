"""Tests for the visitor favorites store."""

from __future__ import annotations

import json

import pytest

from showcase.catalog.favorites import FAVORITES_KEY, FavoritesStore

from factories import DictStore


def _saved(store: DictStore) -> list[str]:
    return json.loads(store.data[FAVORITES_KEY])


def test_toggle_adds_then_removes():
    store = DictStore({FAVORITES_KEY: json.dumps(["catA"])})
    favorites = FavoritesStore(store)

    assert favorites.toggle_favorite("catB") is True
    assert set(_saved(store)) == {"catA", "catB"}

    assert favorites.toggle_favorite("catA") is False
    assert _saved(store) == ["catB"]


@pytest.mark.parametrize("initial", [[], ["catA"], ["catA", "catB"]])
def test_toggle_twice_restores_initial_membership(initial):
    store = DictStore({FAVORITES_KEY: json.dumps(initial)})
    favorites = FavoritesStore(store)
    before = set(favorites.favorites())

    favorites.toggle_favorite("catB")
    favorites.toggle_favorite("catB")

    assert set(favorites.favorites()) == before


def test_missing_storage_reads_as_empty():
    favorites = FavoritesStore(DictStore())

    assert favorites.favorites() == []
    assert not favorites.is_favorited("catA")


@pytest.mark.parametrize("raw", ["not json", "{\"a\": 1}", "42", "null", ""])
def test_corrupt_storage_reads_as_empty_and_heals(raw):
    store = DictStore({FAVORITES_KEY: raw})
    favorites = FavoritesStore(store)

    assert favorites.favorites() == []
    assert favorites.toggle_favorite("catA") is True
    assert _saved(store) == ["catA"]


def test_duplicates_and_non_string_entries_are_ignored():
    store = DictStore({FAVORITES_KEY: json.dumps(["catA", "catA", 7, None])})
    favorites = FavoritesStore(store)

    assert favorites.favorites() == ["catA"]
    favorites.toggle_favorite("catB")
    assert _saved(store) == ["catA", "catB"]


def test_is_favorited_reads_current_state():
    store = DictStore()
    favorites = FavoritesStore(store)

    favorites.toggle_favorite("catA")
    store.data[FAVORITES_KEY] = json.dumps(["catZ"])

    assert not favorites.is_favorited("catA")
    assert favorites.is_favorited("catZ")


def test_custom_key_is_used():
    store = DictStore()

    FavoritesStore(store, key="saved").toggle_favorite("catA")

    assert json.loads(store.data["saved"]) == ["catA"]
    assert FAVORITES_KEY not in store.data
