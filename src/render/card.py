"""Product card construction.

``render_card`` turns a ``ProductRecord`` into a ``ProductCard``: every
display decision (price line, stock line, viewing line, badges, action
availability) is made here, so templates only lay the card out. Interaction
handlers are attached but never invoked during construction.
"""
import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from src.catalog.models import ProductRecord
from src.integrations.amazon.links import extract_asin

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE_PATH = "/images/placeholder.svg"
ERROR_IMAGE_PATH = "/images/error.svg"


@dataclass(frozen=True)
class Badge:
    key: str
    icon: str
    label: str
    tooltip: str


VERIFIED_SELLER = Badge("verified_seller", "✅", "Verified Seller", "This seller is verified and trusted.")
BEST_SELLER = Badge("best_seller", "🌟", "Best Seller", "This product is a best seller.")
ECO_CERTIFIED = Badge("eco_certified", "🌱", "Eco-Certified", "This product is certified eco-friendly.")
AVAILABLE = Badge("available", "🛍️", "Available", "Product is available.")


class StockTone(str, enum.Enum):
    ALERT = "alert"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class PriceLine:
    current: str
    original: str | None = None

    @property
    def is_markdown(self) -> bool:
        return self.original is not None


@dataclass(frozen=True)
class StockLine:
    text: str
    tone: StockTone


CardAction = Callable[[ProductRecord], Any]


@dataclass
class CardCallbacks:
    on_activate: CardAction | None = None
    on_purchase: CardAction | None = None
    on_reviews: CardAction | None = None


@dataclass
class ProductCard:
    record: ProductRecord
    title: str
    description: str
    image_src: str
    image_fallback: str
    price: PriceLine
    stock: StockLine
    viewing: str | None
    badges: list[Badge]
    reviews_label: str
    asin: str | None
    callbacks: CardCallbacks = field(default_factory=CardCallbacks)

    def activate(self) -> Any:
        """Whole card activated (opens the detail view in the storefront)."""
        return self._invoke(self.callbacks.on_activate)

    @property
    def purchase_enabled(self) -> bool:
        return self.asin is not None

    def purchase(self) -> Any:
        if not self.purchase_enabled:
            logger.info("Purchase ignored for product %d: no ASIN", self.record.id)
            return None
        return self._invoke(self.callbacks.on_purchase)

    def reviews(self) -> Any:
        if not self.purchase_enabled:
            logger.info("Reviews ignored for product %d: no ASIN", self.record.id)
            return None
        return self._invoke(self.callbacks.on_reviews)

    def _invoke(self, action: CardAction | None) -> Any:
        if action is None:
            return None
        return action(self.record)


def format_price(value: float) -> str:
    return f"${value:.2f}"


def price_line(record: ProductRecord) -> PriceLine:
    if record.has_markdown:
        return PriceLine(
            current=format_price(record.price),
            original=f"Reg. Price: {format_price(record.retail_price)}",
        )
    return PriceLine(current=format_price(record.price))


def stock_line(record: ProductRecord) -> StockLine:
    if record.stock_left > 0:
        return StockLine(f"Only {record.stock_left} left in stock!", StockTone.ALERT)
    return StockLine("Currently out of stock.", StockTone.NEUTRAL)


def viewing_line(record: ProductRecord) -> str | None:
    if record.people_viewing > 0:
        return f"{record.people_viewing} people viewing now"
    return None


def badges_for(record: ProductRecord) -> list[Badge]:
    badges = []
    if record.is_verified_seller:
        badges.append(VERIFIED_SELLER)
    if record.is_best_seller:
        badges.append(BEST_SELLER)
    if record.is_eco_certified:
        badges.append(ECO_CERTIFIED)
    return badges or [AVAILABLE]


def render_card(
    record: ProductRecord,
    callbacks: CardCallbacks | None = None,
    *,
    placeholder_image: str = PLACEHOLDER_IMAGE_PATH,
    error_image: str = ERROR_IMAGE_PATH,
) -> ProductCard:
    return ProductCard(
        record=record,
        title=record.name,
        description=record.description,
        image_src=record.image_url or placeholder_image,
        image_fallback=error_image,
        price=price_line(record),
        stock=stock_line(record),
        viewing=viewing_line(record),
        badges=badges_for(record),
        reviews_label=f"⭐ {record.star_rating}" if record.shows_rating else "Reviews",
        asin=extract_asin(record.amazon_asin),
        callbacks=callbacks or CardCallbacks(),
    )
