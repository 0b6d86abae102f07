"""Routes for the public storefront and its JSON endpoints."""
from __future__ import annotations

from flask import current_app, jsonify, redirect, render_template, request, url_for

from ..logging_service import log_manager
from . import bp
from .domain import Anonymous, AuthState, Authenticated, Catalog
from .engagement import CtaAction, dispatch_cta, tracker
from .favorites import FAVORITES_KEY, FavoritesStore, SessionStore
from .filtering import CatalogFilter
from .layout import resolve_grid, resolve_palette, resolve_tile, resolve_tiles
from .loader import CatalogLoader, CatalogNetworkError, CatalogNotFound, LookupKey
from .services import fetch_counters, find_catalog_record
from .session import CatalogViewSession
from .viewer import ItemDetailViewer


def _json_error(message: str, *, status: int = 400):
    """Return a consistently formatted JSON error response."""

    response = jsonify({"success": False, "message": message})
    response.status_code = status
    return response


def _favorites_store() -> FavoritesStore:
    key = current_app.config.get("FAVORITES_KEY") or FAVORITES_KEY
    return FavoritesStore(SessionStore(), key=key)


def resolve_auth_state(headers) -> AuthState:
    """Read the owner identity forwarded by the authentication gateway."""

    owner_id = (headers.get("X-Owner-Id") or "").strip()
    if owner_id:
        return Authenticated(owner_id=owner_id)
    return Anonymous()


def _load_by_id(catalog_id: str) -> tuple[Catalog | None, object]:
    """Fetch a published catalog for the fragment and JSON endpoints.

    Returns the catalog, or None plus the error response to send back.
    """

    try:
        result = CatalogLoader().get_catalog_by_id(catalog_id)
    except CatalogNetworkError:
        return None, _json_error("The catalog service is unavailable right now.", status=503)
    if isinstance(result, CatalogNotFound):
        return None, _json_error("Catalog not available.", status=404)
    return result, None


def _render_storefront(key: LookupKey):
    view = CatalogViewSession(
        key,
        loader=CatalogLoader(),
        tracker=tracker,
        favorites=_favorites_store(),
    )
    view.load()

    if not view.is_ready:
        log_manager.record(
            component="Storefront",
            action="view",
            level="warn",
            result=view.failure.value if view.failure else "unavailable",
            title="Catalog not available",
            user_summary="A visitor opened a catalog link that could not be shown.",
            technical_details=(
                f"catalog.storefront lookup {key.describe()} ended with"
                f" {view.failure.value if view.failure else 'no result'}."
            ),
        )
        return render_template("catalog/unavailable.html", title="Catalog Not Available"), 404

    view.set_query(request.args.get("q"))
    view.set_category(request.args.get("category"))
    view.select_item(request.args.get("item"))

    catalog = view.catalog
    log_manager.record(
        component="Storefront",
        action="view",
        level="info",
        result="success",
        title="Catalog viewed",
        user_summary=f"{catalog.business_name} storefront displayed.",
        technical_details=(
            f"catalog.storefront rendered catalog={catalog.id} via {key.strategy}"
            f" template={catalog.template.value} items={len(catalog.items)}."
        ),
    )

    return render_template(
        "catalog/storefront.html",
        title=catalog.business_name,
        catalog=catalog,
        palette=view.palette,
        grid=view.grid,
        tiles=view.visible_tiles(),
        categories=view.categories,
        query=view.query,
        active_category=view.active_category,
        selected=view.selected_tile(),
        selected_item=view.viewer.item,
        is_favorited=view.is_favorited(),
        ctas=[
            {
                "action": cta.action.value,
                "label": cta.label,
                "url": url_for("catalog.cta", catalog_id=catalog.id, action=cta.action.value),
            }
            for cta in view.ctas()
        ],
    )


@bp.route("/view/<slug>")
def storefront_by_slug(slug: str):
    """Render a storefront looked up by its human-readable slug."""

    return _render_storefront(LookupKey(slug=slug))


@bp.route("/view/id/<catalog_id>")
def storefront_by_id(catalog_id: str):
    """Render a storefront looked up by its opaque id."""

    return _render_storefront(LookupKey(catalog_id=catalog_id))


@bp.route("/view/id/<catalog_id>/tiles")
def tiles_fragment(catalog_id: str):
    """Re-render the item tiles for a storefront that is already on screen.

    Search and category changes land here, so they never count as a view.
    """

    catalog, error = _load_by_id(catalog_id)
    if catalog is None:
        return error

    items = CatalogFilter(catalog).items(request.args.get("q"), request.args.get("category"))
    return render_template(
        "catalog/_tiles.html",
        catalog=catalog,
        grid=resolve_grid(catalog.template),
        tiles=resolve_tiles(catalog.template, items, catalog.theme),
    )


@bp.route("/view/id/<catalog_id>/items/<item_id>")
def item_fragment(catalog_id: str, item_id: str):
    """Render the item detail modal for a storefront that is already on screen."""

    catalog, error = _load_by_id(catalog_id)
    if catalog is None:
        return error

    item = ItemDetailViewer().select_by_id(catalog, item_id)
    if item is None:
        return _json_error("Item not found.", status=404)

    return render_template(
        "catalog/_item_detail.html",
        catalog=catalog,
        palette=resolve_palette(catalog.theme),
        selected=resolve_tile(catalog.template, item, catalog.theme),
        selected_item=item,
    )


@bp.route("/cta/<catalog_id>/<action>")
def cta(catalog_id: str, action: str):
    """Count a contact click and send the visitor to the contact target."""

    try:
        cta_action = CtaAction(action)
    except ValueError:
        return _json_error("Unknown contact action.", status=404)

    catalog, error = _load_by_id(catalog_id)
    if catalog is None:
        return error

    target = dispatch_cta(catalog, cta_action, tracker)
    if target is None:
        return _json_error("This catalog has no contact details for that action.", status=404)
    return redirect(target.href, code=302)


@bp.route("/api/catalogs/<catalog_id>/items")
def api_items(catalog_id: str):
    """Return the filtered item tiles for an already loaded storefront."""

    catalog, error = _load_by_id(catalog_id)
    if catalog is None:
        return error

    item_filter = CatalogFilter(catalog)
    query = request.args.get("q", "")
    category = request.args.get("category")
    items = item_filter.items(query, category)
    tiles = resolve_tiles(catalog.template, items, catalog.theme)

    return jsonify(
        {
            "success": True,
            "catalog_id": catalog.id,
            "template": catalog.template.value,
            "categories": list(item_filter.categories),
            "items": [tile.to_dict() for tile in tiles],
            "total": len(catalog.items),
            "matched": len(tiles),
        }
    )


@bp.route("/api/catalogs/<catalog_id>/items/<item_id>")
def api_item_detail(catalog_id: str, item_id: str):
    """Return the content of the item detail modal."""

    catalog, error = _load_by_id(catalog_id)
    if catalog is None:
        return error

    viewer = ItemDetailViewer()
    item = viewer.select_by_id(catalog, item_id)
    if item is None:
        return _json_error("Item not found.", status=404)

    palette = resolve_palette(catalog.theme)
    tile = resolve_tile(catalog.template, item, catalog.theme)
    order_url = (
        url_for("catalog.cta", catalog_id=catalog.id, action=CtaAction.WHATSAPP.value)
        if catalog.whatsapp_number
        else None
    )
    return jsonify(
        {
            "success": True,
            "item": {
                "id": item.id,
                "name": item.name,
                "description": item.description,
                "price": tile.price,
                "price_display": tile.price_display,
                "category": item.category,
                "image_url": item.image_url,
            },
            "accent": palette.accent,
            "order_url": order_url,
        }
    )


@bp.route("/api/favorites")
def api_favorites():
    """List the catalogs this visitor saved."""

    return jsonify({"success": True, "favorites": _favorites_store().favorites()})


@bp.route("/api/favorites/<catalog_id>/toggle", methods=["POST"])
def api_toggle_favorite(catalog_id: str):
    """Save or unsave a catalog for this visitor."""

    catalog, error = _load_by_id(catalog_id)
    if catalog is None:
        return error

    store = _favorites_store()
    favorited = store.toggle_favorite(catalog.id)

    log_manager.record(
        component="Favorites",
        action="toggle",
        level="info",
        result="success",
        title="Catalog saved" if favorited else "Catalog unsaved",
        user_summary=(
            f"{catalog.business_name} was {'added to' if favorited else 'removed from'}"
            " a visitor's favorites."
        ),
        technical_details=f"catalog.api_toggle_favorite catalog={catalog.id} favorited={favorited}.",
    )

    return jsonify(
        {
            "success": True,
            "catalog_id": catalog.id,
            "favorited": favorited,
            "favorites": store.favorites(),
        }
    )


@bp.route("/api/catalogs/<catalog_id>/engagement")
def api_engagement(catalog_id: str):
    """Expose engagement counters to the catalog's owner."""

    auth = resolve_auth_state(request.headers)
    if isinstance(auth, Anonymous):
        return _json_error("Sign in to view engagement.", status=401)

    record = find_catalog_record(catalog_id)
    if record is None:
        return _json_error("Catalog not found.", status=404)
    if record.owner_id != auth.owner_id:
        return _json_error("You do not own this catalog.", status=403)

    return jsonify(
        {
            "success": True,
            "catalog_id": record.id,
            "counters": fetch_counters(record.id),
        }
    )
