"""Immutable catalog snapshots consumed by the storefront."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Union


class TemplateVariant(str, Enum):
    """Rendering strategies a merchant can pick for their item list."""

    DEFAULT = "DEFAULT"
    GALLERY = "GALLERY"
    MINIMALIST = "MINIMALIST"

    @classmethod
    def parse(cls, value: object) -> TemplateVariant:
        """Return the matching variant, falling back to DEFAULT for anything unknown."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        return cls.DEFAULT


class LogoStyle(str, Enum):
    CIRCLE = "circle"
    SQUARE = "square"

    @classmethod
    def parse(cls, value: object) -> LogoStyle:
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().lower() == cls.CIRCLE.value:
            return cls.CIRCLE
        return cls.SQUARE


class EngagementKind(str, Enum):
    """Counters tracked per catalog."""

    VIEWS = "views"
    CALL_CLICKS = "callClicks"
    WHATSAPP_CLICKS = "whatsappClicks"
    DIRECTION_CLICKS = "directionClicks"


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class CatalogTheme:
    """Visual configuration for a storefront.

    Every option is optional; the layout module supplies the fallbacks.
    """

    template: TemplateVariant = TemplateVariant.DEFAULT
    primary_color: str | None = None
    background_color: str | None = None
    text_color: str | None = None
    font: str | None = None
    font_size_heading: str | None = None
    font_size_body: str | None = None
    logo_style: LogoStyle | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> CatalogTheme:
        """Build a theme from the editor's stored JSON, ignoring unknown keys.

        Both camelCase keys (as written by the editor) and snake_case keys are
        accepted.
        """

        data = data or {}

        def pick(snake: str, camel: str) -> Any:
            if snake in data:
                return data[snake]
            return data.get(camel)

        logo_style = pick("logo_style", "logoStyle")
        return cls(
            template=TemplateVariant.parse(data.get("template")),
            primary_color=_optional_text(pick("primary_color", "primaryColor")),
            background_color=_optional_text(pick("background_color", "backgroundColor")),
            text_color=_optional_text(pick("text_color", "textColor")),
            font=_optional_text(data.get("font")),
            font_size_heading=_optional_text(pick("font_size_heading", "fontSizeHeading")),
            font_size_body=_optional_text(pick("font_size_body", "fontSizeBody")),
            logo_style=LogoStyle.parse(logo_style) if logo_style else None,
        )


@dataclass(frozen=True)
class CatalogItem:
    """A single product or service listed in a catalog."""

    id: str
    name: str
    description: str
    price: Decimal
    category: str | None = None
    image_url: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.price, Decimal):
            object.__setattr__(self, "price", Decimal(str(self.price)))
        if self.price < 0:
            raise ValueError(f"Item {self.id!r} has a negative price.")


@dataclass(frozen=True)
class Catalog:
    """Read-only snapshot of a published catalog."""

    id: str
    owner_id: str
    slug: str
    business_name: str
    description: str
    theme: CatalogTheme = field(default_factory=CatalogTheme)
    items: tuple[CatalogItem, ...] = ()
    logo_url: str | None = None
    phone_number: str | None = None
    whatsapp_number: str | None = None
    address: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))
        seen: set[str] = set()
        for item in self.items:
            if item.id in seen:
                raise ValueError(f"Duplicate item id {item.id!r} in catalog {self.id!r}.")
            seen.add(item.id)

    @property
    def template(self) -> TemplateVariant:
        return self.theme.template

    def find_item(self, item_id: str) -> CatalogItem | None:
        """Return the item with the given id, if present."""

        return next((item for item in self.items if item.id == str(item_id)), None)


@dataclass(frozen=True)
class Anonymous:
    """A visitor without an authenticated identity."""


@dataclass(frozen=True)
class Authenticated:
    """A signed-in catalog owner, as vouched for by the auth collaborator."""

    owner_id: str


AuthState = Union[Anonymous, Authenticated]
