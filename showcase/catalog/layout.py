"""Resolve catalog items into layout directives for each template variant.

Everything here is a pure function of its inputs: identical
``(template, item, theme)`` arguments always produce equal results, and
an unknown template never raises but renders with the DEFAULT layout.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from .domain import CatalogItem, CatalogTheme, LogoStyle, TemplateVariant

DEFAULT_ACCENT = "#2563EB"
DEFAULT_BACKGROUND = "#ffffff"
DEFAULT_TEXT = "#0F172A"
DEFAULT_FONT = "font-sans"
DEFAULT_HEADING_SIZE = "text-4xl"
DEFAULT_BODY_SIZE = "text-base"

PLACEHOLDER_ICON = "shopping-bag"
THUMBNAIL_SIZE = 80

LOGO_CLASSES = {
    LogoStyle.CIRCLE: "rounded-full",
    LogoStyle.SQUARE: "rounded-3xl",
}


@dataclass(frozen=True)
class Palette:
    """Resolved colors and typography for a storefront."""

    accent: str
    background: str
    text: str
    font: str
    heading_size: str
    body_size: str
    logo_style: str
    logo_class: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class TileLayout:
    """Rendering directive for a single item tile."""

    item_id: str
    layout: str
    name: str
    description: str
    description_lines: int
    price: float
    price_display: str
    price_color: str
    image_url: str | None
    placeholder_icon: str | None
    thumbnail_size: int | None
    show_chevron: bool

    @property
    def show_image(self) -> bool:
        return self.image_url is not None

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["show_image"] = self.show_image
        return data


def format_price(value: Decimal | float | str) -> str:
    """Format a price using standard USD formatting."""

    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    quantized = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"${quantized:,.2f}"


def resolve_palette(theme: CatalogTheme | None) -> Palette:
    """Apply the documented fallbacks to a theme's optional fields."""

    theme = theme or CatalogTheme()
    logo_style = theme.logo_style or LogoStyle.SQUARE
    return Palette(
        accent=theme.primary_color or DEFAULT_ACCENT,
        background=theme.background_color or DEFAULT_BACKGROUND,
        text=theme.text_color or DEFAULT_TEXT,
        font=theme.font or DEFAULT_FONT,
        heading_size=theme.font_size_heading or DEFAULT_HEADING_SIZE,
        body_size=theme.font_size_body or DEFAULT_BODY_SIZE,
        logo_style=logo_style.value,
        logo_class=LOGO_CLASSES[logo_style],
    )


def resolve_grid(template: TemplateVariant | str | None) -> str:
    """Return the item container used by a template variant."""

    if TemplateVariant.parse(template) is TemplateVariant.GALLERY:
        return "grid-2"
    return "stack"


def _minimalist_tile(item: CatalogItem, accent: str) -> TileLayout:
    # rows never carry an image, even when the item has one
    return TileLayout(
        item_id=item.id,
        layout="row",
        name=item.name,
        description=item.description,
        description_lines=1,
        price=float(item.price),
        price_display=format_price(item.price),
        price_color=accent,
        image_url=None,
        placeholder_icon=None,
        thumbnail_size=None,
        show_chevron=True,
    )


def _gallery_tile(item: CatalogItem, accent: str) -> TileLayout:
    return TileLayout(
        item_id=item.id,
        layout="card",
        name=item.name,
        description=item.description,
        description_lines=2,
        price=float(item.price),
        price_display=format_price(item.price),
        price_color=accent,
        image_url=item.image_url or None,
        placeholder_icon=None,
        thumbnail_size=None,
        show_chevron=False,
    )


def _default_tile(item: CatalogItem, accent: str) -> TileLayout:
    image_url = item.image_url or None
    return TileLayout(
        item_id=item.id,
        layout="tile",
        name=item.name,
        description=item.description,
        description_lines=2,
        price=float(item.price),
        price_display=format_price(item.price),
        price_color=accent,
        image_url=image_url,
        placeholder_icon=None if image_url else PLACEHOLDER_ICON,
        thumbnail_size=THUMBNAIL_SIZE,
        show_chevron=False,
    )


_TILE_BUILDERS = {
    TemplateVariant.MINIMALIST: _minimalist_tile,
    TemplateVariant.GALLERY: _gallery_tile,
    TemplateVariant.DEFAULT: _default_tile,
}


def resolve_tile(
    template: TemplateVariant | str | None,
    item: CatalogItem,
    theme: CatalogTheme | None = None,
) -> TileLayout:
    """Return the layout directive for ``item`` under ``template``."""

    accent = resolve_palette(theme).accent
    builder = _TILE_BUILDERS[TemplateVariant.parse(template)]
    return builder(item, accent)


def resolve_tiles(
    template: TemplateVariant | str | None,
    items: Iterable[CatalogItem],
    theme: CatalogTheme | None = None,
) -> tuple[TileLayout, ...]:
    """Resolve every item in order."""

    return tuple(resolve_tile(template, item, theme) for item in items)
