"""Visitor-local favorites backed by an injected key-value store."""
from __future__ import annotations

import json
from typing import Protocol

from flask import session

FAVORITES_KEY = "showcase_favorites"


class KeyValueStore(Protocol):
    """Minimal persistent string store owned by the visitor."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class SessionStore:
    """Key-value store kept in the visitor's signed session cookie."""

    def get(self, key: str) -> str | None:
        value = session.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        session[key] = value
        session.permanent = True


class FavoritesStore:
    """Read and toggle the set of catalogs a visitor saved.

    The set is stored as a JSON array of ids. Missing, corrupt or non-list
    content reads as empty and is replaced by the next toggle. There is no
    locking: concurrent writers resolve as last write wins.
    """

    def __init__(self, store: KeyValueStore, *, key: str = FAVORITES_KEY) -> None:
        self._store = store
        self._key = key

    def _read(self) -> list[str]:
        raw = self._store.get(self._key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            return []
        if not isinstance(data, list):
            return []

        favorites: list[str] = []
        for entry in data:
            if isinstance(entry, str) and entry not in favorites:
                favorites.append(entry)
        return favorites

    def favorites(self) -> list[str]:
        """Return the saved catalog ids."""

        return self._read()

    def is_favorited(self, catalog_id: str) -> bool:
        return catalog_id in self._read()

    def toggle_favorite(self, catalog_id: str) -> bool:
        """Add or remove ``catalog_id`` and return the new membership."""

        saved = self._read()
        if catalog_id in saved:
            saved = [entry for entry in saved if entry != catalog_id]
            favorited = False
        else:
            saved.append(catalog_id)
            favorited = True
        self._store.set(self._key, json.dumps(saved))
        return favorited
