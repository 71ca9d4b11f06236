from src.catalog.models import ProductRecord

SAMPLE_IMAGE_URL = "https://via.placeholder.com/300x200?text=Sample+Product"


def sample_product() -> ProductRecord:
    """Built-in record shown when the feed cannot be loaded."""
    return ProductRecord(
        id=999,
        category="Sample Category",
        name="Sample Product (Fallback)",
        description=(
            "This is a sample product description used when the product feed is "
            "unavailable or empty. It shows how a product card looks."
        ),
        price=9.99,
        image_url=SAMPLE_IMAGE_URL,
        amazon_asin="B000000000",
        stock_left=5,
        people_viewing=15,
        star_rating="4.5",
    )
