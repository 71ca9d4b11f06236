"""Map raw feed payloads onto ``ProductRecord``.

The spreadsheet feed has been published in two shapes over time: column
headers used verbatim ("display-label" scheme, e.g. ``"Price ($)"``) and a
later camel-case export (``productPrice``). Each shape has its own decoder;
every field coerces through the helpers below so a bad cell falls back to the
record default instead of failing the whole feed.
"""
import enum
import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from src.catalog.models import NO_RATING, ProductRecord

_DIGITS_RE = re.compile(r"\d+")
# Currency symbols, whitespace and thousands separators ("$1,299.00")
_PRICE_NOISE_RE = re.compile(r"[\s$€£]|,(?=\d{3}(?:\D|$))")
_TRUE_STRINGS = {"true", "yes", "y", "1"}


class FeedScheme(str, enum.Enum):
    DISPLAY_LABEL = "display_label"
    CAMEL_CASE = "camel_case"


DISPLAY_LABEL_KEYS = frozenset({
    "Product ID",
    "Category",
    "Product Name",
    "Description",
    "Price ($)",
    "Retail Price ($)",
    "Image URL",
    "Amazon ASIN",
    "Video URL",
    "Star Rating",
    "Stock Left",
    "People Viewing",
    "Is Verified Seller",
    "Is Best Seller",
    "Is Eco Certified",
})

CAMEL_CASE_KEYS = frozenset({
    "productId",
    "productCategory",
    "productName",
    "productDescription",
    "productPrice",
    "productPriceOld",
    "productImageUrl",
    "productAsin",
    "productVideoUrl",
    "productRating",
    "productFomoText",
    "productPeopleViewing",
    "productBadge",
})

# Categorical badge label (camel-case scheme) -> ProductRecord flag
BADGE_FLAGS = {
    "verified seller": "is_verified_seller",
    "best seller": "is_best_seller",
    "eco-friendly": "is_eco_certified",
}


def _to_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(_PRICE_NOISE_RE.sub("", value))
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _to_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return 0
        number = int(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = int(text)
        except ValueError:
            try:
                as_float = float(text)
            except ValueError:
                return 0
            if not math.isfinite(as_float) or not as_float.is_integer():
                return 0
            number = int(as_float)
    else:
        return 0
    return number if number >= 0 else 0


def _to_text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (str, int, float)):
        return str(value).strip()
    return ""


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def _to_rating(value: Any) -> str:
    if isinstance(value, bool):
        return NO_RATING
    if isinstance(value, float):
        return f"{value:g}" if math.isfinite(value) else NO_RATING
    return _to_text(value) or NO_RATING


def _stock_from_text(value: Any) -> int:
    """First run of digits in free text such as "Only 5 left", else 0."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _to_int(value)
    if not isinstance(value, str):
        return 0
    match = _DIGITS_RE.search(value)
    return int(match.group(0)) if match else 0


def detect_scheme(raw: Mapping) -> FeedScheme | None:
    """Pick the key scheme with the most recognised keys; display labels win ties."""
    keys = set(raw.keys())
    display_hits = len(DISPLAY_LABEL_KEYS & keys)
    camel_hits = len(CAMEL_CASE_KEYS & keys)
    if not display_hits and not camel_hits:
        return None
    if display_hits >= camel_hits:
        return FeedScheme.DISPLAY_LABEL
    return FeedScheme.CAMEL_CASE


def _decode_display_label(raw: Mapping) -> ProductRecord:
    return ProductRecord(
        id=_to_int(raw.get("Product ID")),
        category=_to_text(raw.get("Category")),
        name=_to_text(raw.get("Product Name")),
        description=_to_text(raw.get("Description")),
        price=_to_float(raw.get("Price ($)")),
        retail_price=_to_float(raw.get("Retail Price ($)")),
        image_url=_to_text(raw.get("Image URL")),
        amazon_asin=_to_text(raw.get("Amazon ASIN")),
        video_url=_to_text(raw.get("Video URL")),
        star_rating=_to_rating(raw.get("Star Rating")),
        stock_left=_to_int(raw.get("Stock Left")),
        people_viewing=_to_int(raw.get("People Viewing")),
        is_verified_seller=_to_bool(raw.get("Is Verified Seller")),
        is_best_seller=_to_bool(raw.get("Is Best Seller")),
        is_eco_certified=_to_bool(raw.get("Is Eco Certified")),
    )


def _decode_camel_case(raw: Mapping) -> ProductRecord:
    flags = {flag: False for flag in BADGE_FLAGS.values()}
    badge = _to_text(raw.get("productBadge")).lower()
    if badge in BADGE_FLAGS:
        flags[BADGE_FLAGS[badge]] = True

    return ProductRecord(
        id=_to_int(raw.get("productId")),
        category=_to_text(raw.get("productCategory")),
        name=_to_text(raw.get("productName")),
        description=_to_text(raw.get("productDescription")),
        price=_to_float(raw.get("productPrice")),
        retail_price=_to_float(raw.get("productPriceOld")),
        image_url=_to_text(raw.get("productImageUrl")),
        amazon_asin=_to_text(raw.get("productAsin")),
        video_url=_to_text(raw.get("productVideoUrl")),
        star_rating=_to_rating(raw.get("productRating")),
        stock_left=_stock_from_text(raw.get("productFomoText")),
        people_viewing=_to_int(raw.get("productPeopleViewing")),
        **flags,
    )


_DECODERS = {
    FeedScheme.DISPLAY_LABEL: _decode_display_label,
    FeedScheme.CAMEL_CASE: _decode_camel_case,
}


def normalize(raw: Any) -> ProductRecord:
    """Decode one feed payload. Never raises; unknown shapes yield the defaults."""
    if not isinstance(raw, Mapping):
        return ProductRecord()
    scheme = detect_scheme(raw)
    if scheme is None:
        return ProductRecord()
    return _DECODERS[scheme](raw)


def normalize_feed(payloads: Iterable[Any]) -> list[ProductRecord]:
    return [normalize(raw) for raw in payloads]
