from pydantic import BaseModel

from src.render.listing import ListState


class BadgeResponse(BaseModel):
    key: str
    label: str
    tooltip: str


class ProductCardResponse(BaseModel):
    position: int
    id: int
    category: str
    name: str
    description: str
    image_url: str
    image_fallback_url: str
    price: str
    original_price: str | None = None
    stock_message: str
    stock_tone: str
    viewing_message: str | None = None
    star_rating: str
    reviews_label: str
    badges: list[BadgeResponse]
    amazon_asin: str
    buy_url: str | None = None
    reviews_url: str | None = None


class ProductListResponse(BaseModel):
    state: ListState
    generation: int
    message: str | None = None
    items: list[ProductCardResponse]
