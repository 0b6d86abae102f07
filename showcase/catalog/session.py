"""View model for one mounted storefront."""
from __future__ import annotations

from enum import Enum
from typing import Protocol

from .domain import Catalog, CatalogItem, EngagementKind
from .engagement import Cta, CtaAction, EngagementTracker, available_ctas, dispatch_cta
from .favorites import FavoritesStore
from .filtering import CatalogFilter, normalize_category, normalize_query
from .layout import Palette, TileLayout, resolve_grid, resolve_palette, resolve_tile, resolve_tiles
from .loader import CatalogNetworkError, CatalogNotFound, LoadResult, LookupKey
from .viewer import ItemDetailViewer


class Loader(Protocol):
    def load(self, key: LookupKey) -> LoadResult: ...


class ViewStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"


class LoadFailure(str, Enum):
    """Why a storefront is unavailable. Visitors see the same page for both."""

    NOT_FOUND = "not_found"
    NETWORK_ERROR = "network_error"


class CatalogViewSession:
    """Load a catalog once, then serve filtering, detail and CTA interactions.

    ``load`` issues at most one fetch and records exactly one ``views`` event
    when it succeeds. A fetch that completes after ``teardown`` is discarded.
    Rendering (``visible_tiles`` and friends) never records anything.
    """

    def __init__(
        self,
        key: LookupKey,
        *,
        loader: Loader,
        tracker: EngagementTracker,
        favorites: FavoritesStore,
    ) -> None:
        self.key = key
        self._loader = loader
        self._tracker = tracker
        self._favorites = favorites
        self._filter = CatalogFilter()
        self._viewer = ItemDetailViewer()
        self._fetch_started = False
        self._mounted = True

        self.status = ViewStatus.LOADING
        self.failure: LoadFailure | None = None
        self.catalog: Catalog | None = None
        self.query = ""
        self.active_category: str | None = None

    @property
    def is_ready(self) -> bool:
        return self.status is ViewStatus.READY

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    @property
    def viewer(self) -> ItemDetailViewer:
        return self._viewer

    def teardown(self) -> None:
        """Unmount; later fetch results are ignored."""

        self._mounted = False

    def load(self) -> ViewStatus:
        if self._fetch_started or not self._mounted:
            return self.status
        self._fetch_started = True

        try:
            result = self._loader.load(self.key)
        except CatalogNetworkError:
            if self._mounted:
                self._fail(LoadFailure.NETWORK_ERROR)
            return self.status

        if not self._mounted:
            return self.status

        if isinstance(result, CatalogNotFound):
            self._fail(LoadFailure.NOT_FOUND)
            return self.status

        self.catalog = result
        self._filter.bind(result)
        self.status = ViewStatus.READY
        self._tracker.record_event(result.id, EngagementKind.VIEWS)
        return self.status

    def _fail(self, failure: LoadFailure) -> None:
        self.status = ViewStatus.UNAVAILABLE
        self.failure = failure

    def set_query(self, query: str | None) -> None:
        self.query = normalize_query(query)

    def set_category(self, category: str | None) -> None:
        self.active_category = normalize_category(category)

    @property
    def categories(self) -> tuple[str, ...]:
        return self._filter.categories

    @property
    def palette(self) -> Palette:
        return resolve_palette(self.catalog.theme if self.catalog else None)

    @property
    def grid(self) -> str:
        return resolve_grid(self.catalog.template if self.catalog else None)

    def visible_items(self) -> tuple[CatalogItem, ...]:
        return self._filter.items(self.query, self.active_category)

    def visible_tiles(self) -> tuple[TileLayout, ...]:
        if self.catalog is None:
            return ()
        return resolve_tiles(self.catalog.template, self.visible_items(), self.catalog.theme)

    def select_item(self, item_id: str | None) -> CatalogItem | None:
        if self.catalog is None:
            return None
        return self._viewer.select_by_id(self.catalog, item_id)

    def dismiss_item(self) -> None:
        self._viewer.dismiss()

    def selected_tile(self) -> TileLayout | None:
        item = self._viewer.item
        if item is None or self.catalog is None:
            return None
        return resolve_tile(self.catalog.template, item, self.catalog.theme)

    def is_favorited(self) -> bool:
        if self.catalog is None:
            return False
        return self._favorites.is_favorited(self.catalog.id)

    def toggle_favorite(self) -> bool:
        if self.catalog is None:
            return False
        return self._favorites.toggle_favorite(self.catalog.id)

    def ctas(self) -> list[Cta]:
        if self.catalog is None:
            return []
        return available_ctas(self.catalog)

    def cta(self, action: CtaAction | str) -> Cta | None:
        """Record the click and return the navigation target."""

        if self.catalog is None:
            return None
        return dispatch_cta(self.catalog, action, self._tracker)

    def complete_item_cta(self) -> Cta | None:
        """Run the in-modal order CTA and close the modal.

        Over HTTP the same sequence is split in two: the modal's order link
        hits ``/cta/<id>/whatsapp``, which records the click and redirects, and
        the page clears the modal as the link is followed.
        """

        cta = self.cta(CtaAction.WHATSAPP)
        self._viewer.complete_cta()
        return cta
