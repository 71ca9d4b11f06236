from pydantic import BaseModel, Field

NO_RATING = "N/A"


class ProductRecord(BaseModel):
    """Canonical product as rendered by the storefront, whatever feed scheme it came from."""

    model_config = {"frozen": True}

    id: int = 0
    category: str = ""
    name: str = ""
    description: str = ""
    price: float = Field(default=0.0, ge=0)
    retail_price: float = Field(default=0.0, ge=0)
    image_url: str = ""
    amazon_asin: str = ""
    video_url: str = ""
    star_rating: str = NO_RATING
    stock_left: int = Field(default=0, ge=0)
    people_viewing: int = Field(default=0, ge=0)
    is_verified_seller: bool = False
    is_best_seller: bool = False
    is_eco_certified: bool = False

    @property
    def has_markdown(self) -> bool:
        return self.retail_price > 0 and self.retail_price > self.price

    @property
    def has_asin(self) -> bool:
        return bool(self.amazon_asin.strip())

    @property
    def shows_rating(self) -> bool:
        rating = self.star_rating.strip()
        return bool(rating) and rating != NO_RATING
