import re
from urllib.parse import quote, urlencode

AMAZON_BASE = "https://www.amazon.com"

_ASIN_RE = re.compile(r"^[A-Za-z0-9]{10}$")


def extract_asin(value: str) -> str | None:
    """Return the ASIN from a bare identifier or an Amazon product URL."""
    value = value.strip()
    if _ASIN_RE.match(value):
        return value.upper()
    match = re.search(r"/dp/([A-Z0-9]{10})", value)
    if match:
        return match.group(1)
    match = re.search(r"/gp/product/([A-Z0-9]{10})", value)
    if match:
        return match.group(1)
    return None


def product_url(asin: str, affiliate_tag: str) -> str | None:
    """Affiliate-tagged product page, or None when there is no usable ASIN."""
    resolved = extract_asin(asin) if asin else None
    if not resolved:
        return None
    return f"{AMAZON_BASE}/dp/{quote(resolved)}?{urlencode({'tag': affiliate_tag})}"


def reviews_url(asin: str) -> str | None:
    resolved = extract_asin(asin) if asin else None
    if not resolved:
        return None
    return f"{AMAZON_BASE}/product-reviews/{quote(resolved)}"


def share_links(page_url: str, title: str) -> dict[str, str]:
    """Social share URLs for the storefront page."""
    url = quote(page_url, safe="")
    text = quote(title, safe="")
    return {
        "facebook": f"https://www.facebook.com/sharer/sharer.php?u={url}",
        "twitter": f"https://twitter.com/intent/tweet?url={url}&text={text}",
        "whatsapp": f"https://api.whatsapp.com/send?text={text}%20{url}",
        "linkedin": f"https://www.linkedin.com/sharing/share-offsite/?url={url}",
    }
