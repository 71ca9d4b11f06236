"""Jinja2 rendering of the storefront page and the detail overlay fragment."""
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from src.core.config import settings
from src.integrations.amazon.links import extract_asin, share_links
from src.render.detail import OverlayContent
from src.render.listing import ProductListView
from src.services.ads_service import AdSlotState

_template_dir = Path(__file__).parent / "templates"
_jinja_env = Environment(loader=FileSystemLoader(str(_template_dir)), autoescape=True)

INSTALL_FALLBACK_MESSAGE = 'To install, use the "Add to Home Screen" option in your browser menu.'
VIDEO_ERROR_MESSAGE = "Could not load video."


def render_storefront(
    container: ProductListView,
    ads: dict[str, AdSlotState | None],
    page_url: str,
) -> str:
    template = _jinja_env.get_template("storefront.html")
    return template.render(
        title=settings.store_title,
        container=container,
        ads=ads,
        share=share_links(page_url, settings.store_title),
        install_fallback=INSTALL_FALLBACK_MESSAGE,
    )


def render_overlay(content: OverlayContent) -> str:
    template = _jinja_env.get_template("overlay.html")
    return template.render(
        content=content,
        asin=extract_asin(content.record.amazon_asin),
        video_error_message=VIDEO_ERROR_MESSAGE,
    )


def web_manifest() -> dict:
    return {
        "name": settings.store_title,
        "short_name": "Clean Store",
        "start_url": "/",
        "display": "standalone",
        "background_color": "#f9fafb",
        "theme_color": "#4f46e5",
        "icons": [
            {"src": "/images/placeholder.svg", "sizes": "any", "type": "image/svg+xml"},
        ],
    }
