"""HTML rendering for lite pages, promo cards and print cards.

Every function here is pure: it takes an already-aggregated
``LitePageData`` snapshot (plus the canonical URL and a QR image source)
and returns a complete HTML document. Templates are rendered with
autoescaping on, so partner and guest text can never alter the markup.
The one exception is the host-authored house-rules field, which is
explicitly marked trusted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from litepages.config import lite_settings
from litepages.models.lite import DEFAULT_ACCENT
from litepages.modules.offers.resolver import apply_discount, discount_label
from litepages.text import clean_description, currency_symbol, format_money, localized_text, paragraphs

if TYPE_CHECKING:
    from litepages.modules.content.aggregator import ImageInfo, LitePageData, PropertyInfo

TEMPLATE_DIR = Path(__file__).resolve().parent.parent.parent / "templates"

GALLERY_SLOTS = 5
_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{3}([0-9a-fA-F]{3})?$")

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(default=True, default_for_string=True),
    trim_blocks=True,
    lstrip_blocks=True,
)


@dataclass(frozen=True)
class GallerySlot:
    index: int
    url: str
    more: int = 0  # "+N more" overlay count, only on the last slot


@dataclass(frozen=True)
class PriceDisplay:
    amount: float | None
    original: float | None
    symbol: str

    @property
    def text(self) -> str:
        return format_money(self.amount, self.symbol)

    @property
    def original_text(self) -> str:
        return format_money(self.original, self.symbol)

    @property
    def discounted(self) -> bool:
        return self.original is not None and self.original != self.amount


def page_title(data: LitePageData) -> str:
    """Custom title when it differs from the unit name, else the unit's name, else the property's."""
    custom = data.lite.custom_title
    unit = data.unit
    if custom and (unit is None or custom != unit.name):
        return custom
    if unit is not None:
        return unit.display_name or unit.name
    return data.prop.name


def location_line(prop: PropertyInfo) -> str:
    return ", ".join(part for part in (prop.city, prop.country) if part)


def safe_accent(color: str | None) -> str:
    """Accent colour is interpolated into CSS, so only plain hex colours pass."""
    if color and _HEX_COLOR.match(color):
        return color
    return DEFAULT_ACCENT


def gallery_slots(images: tuple[ImageInfo, ...]) -> tuple[GallerySlot | None, list[GallerySlot]]:
    """Hero image plus up to four thumbnails; the fifth slot carries the "+N more" overlay."""
    if not images:
        return None, []
    hero = GallerySlot(index=0, url=images[0].url)
    thumbs = []
    for index, image in enumerate(images[1:GALLERY_SLOTS], start=1):
        more = len(images) - GALLERY_SLOTS if index == GALLERY_SLOTS - 1 and len(images) > GALLERY_SLOTS else 0
        thumbs.append(GallerySlot(index=index, url=image.url, more=more))
    return hero, thumbs


def price_display(data: LitePageData) -> PriceDisplay:
    symbol = currency_symbol(data.prop.currency)
    base = data.today_price
    if data.offer is None:
        return PriceDisplay(amount=base, original=None, symbol=symbol)
    return PriceDisplay(amount=apply_discount(base, data.offer), original=base, symbol=symbol)


def format_rating(value: float | None) -> str:
    return f"{value:.1f}" if value is not None else ""


def _descriptions(data: LitePageData) -> tuple[str, str]:
    unit = data.unit
    raw_short = (unit.short_description if unit else None) or data.prop.short_description or ""
    raw_full = (unit.full_description if unit else None) or data.prop.full_description or raw_short
    return clean_description(raw_short), clean_description(raw_full)


def _common(data: LitePageData, page_url: str, qr_src: str) -> dict[str, Any]:
    cfg = lite_settings()
    short_desc, full_desc = _descriptions(data)
    return {
        "data": data,
        "lite": data.lite,
        "prop": data.prop,
        "unit": data.unit,
        "title": page_title(data),
        "location": location_line(data.prop),
        "accent": safe_accent(data.lite.accent_color),
        "page_url": page_url,
        "qr_src": qr_src,
        "price": price_display(data),
        "offer": data.offer,
        "offer_label": discount_label(data.offer, currency_symbol(data.prop.currency)) if data.offer else "",
        "short_description": short_desc,
        "full_description": full_desc,
        "tagline": data.lite.custom_tagline or short_desc,
        "rating": format_rating(data.average_rating),
        "brand": cfg.get("brand_name", "LitePages"),
        "create_url": cfg.get("create_url", "/"),
    }


def render_full_page(data: LitePageData, page_url: str, qr_src: str) -> str:
    context = _common(data, page_url, qr_src)
    hero, thumbs = gallery_slots(data.images)
    unit = data.unit
    context.update({
        "hero": hero,
        "thumbs": thumbs,
        "description_paragraphs": paragraphs(context["full_description"]),
        "house_rules": Markup(localized_text(data.prop.house_rules)) if data.prop.house_rules else None,
        "has_location": data.prop.latitude is not None and data.prop.longitude is not None,
        "max_adults": (unit.max_guests if unit and unit.max_guests else None) or 8,
        "client": {
            "images": [image.url for image in data.images],
            "pageUrl": page_url,
            "title": context["title"],
            "unitId": unit.id if unit else None,
            "propertyId": data.prop.id,
            "currency": context["price"].symbol,
            "today": data.today.isoformat(),
            "showAvailability": data.lite.show_availability,
        },
    })
    return _env.get_template("full_page.html").render(context)


def render_promo_card(data: LitePageData, page_url: str, qr_src: str) -> str:
    context = _common(data, page_url, qr_src)
    cta_url = f"{page_url}?offer={data.offer.code}" if data.offer else page_url
    context.update({
        "image": data.hero_image,
        "cta_url": cta_url,
    })
    return _env.get_template("promo_card.html").render(context)


def render_print_card(data: LitePageData, page_url: str, qr_src: str) -> str:
    context = _common(data, page_url, qr_src)
    context["image"] = data.hero_image
    return _env.get_template("print_card.html").render(context)


def render_not_found(slug: str) -> str:
    cfg = lite_settings()
    return _env.get_template("not_found.html").render(
        slug=slug, create_url=cfg.get("create_url", "/"), brand=cfg.get("brand_name", "LitePages"),
    )


def render_error(message: str | None = None) -> str:
    return _env.get_template("error.html").render(message=message or "Please try again.")


def render_home() -> str:
    cfg = lite_settings()
    return _env.get_template("home.html").render(
        brand=cfg.get("brand_name", "LitePages"), create_url=cfg.get("create_url", "/"),
    )
