from src.integrations.amazon.links import product_url, reviews_url
from src.render.card import ProductCard
from src.render.detail import OverlayContent, DetailOverlay


def card_to_dict(position: int, card: ProductCard, affiliate_tag: str) -> dict:
    record = card.record
    return {
        "position": position,
        "id": record.id,
        "category": record.category,
        "name": card.title,
        "description": card.description,
        "image_url": card.image_src,
        "image_fallback_url": card.image_fallback,
        "price": card.price.current,
        "original_price": card.price.original,
        "stock_message": card.stock.text,
        "stock_tone": card.stock.tone.value,
        "viewing_message": card.viewing,
        "star_rating": record.star_rating,
        "reviews_label": card.reviews_label,
        "badges": [
            {"key": b.key, "label": b.label, "tooltip": b.tooltip} for b in card.badges
        ],
        "amazon_asin": record.amazon_asin,
        "buy_url": product_url(record.amazon_asin, affiliate_tag) if card.purchase_enabled else None,
        "reviews_url": reviews_url(record.amazon_asin) if card.purchase_enabled else None,
    }


def overlay_to_dict(overlay: DetailOverlay) -> dict:
    content: OverlayContent | None = overlay.content
    return {
        "is_open": overlay.is_open,
        "is_playing": overlay.is_playing,
        "details_visible": content.details_visible if content else False,
        "video_error": content.video_error if content else False,
        "product_id": content.record.id if content else None,
    }
