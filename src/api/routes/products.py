from fastapi import APIRouter, Depends

from src.api.dependencies.storefront import get_storefront
from src.mappers.product_card import card_to_dict
from src.models.dto.product import ProductCardResponse, ProductListResponse
from src.services.storefront_service import Storefront

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    refresh: bool = False,
    storefront: Storefront = Depends(get_storefront),
):
    """Current product list. The feed is fetched on first use or when ``refresh`` is set."""
    if refresh or storefront.latest_pass == 0:
        view = await storefront.refresh()
    else:
        view = storefront.latest
    return {
        "state": view.state,
        "generation": storefront.latest_pass,
        "message": view.message,
        "items": [
            card_to_dict(position, card, storefront.affiliate_tag)
            for position, card in enumerate(view.cards)
        ],
    }


@router.get("/{product_id}", response_model=ProductCardResponse)
async def get_product(
    product_id: int,
    storefront: Storefront = Depends(get_storefront),
):
    card = storefront.card_by_id(product_id)
    position = storefront.latest.cards.index(card)
    return card_to_dict(position, card, storefront.affiliate_tag)
