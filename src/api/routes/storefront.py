from typing import Literal

from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from src.api.dependencies.rate_limit import rate_limit
from src.api.dependencies.storefront import get_overlay, get_storefront
from src.render.detail import DetailOverlay
from src.render.pages import render_overlay, render_storefront, web_manifest
from src.services.ads_service import current_ads
from src.services.image_service import ERROR_LABEL, PLACEHOLDER_LABEL, generate_placeholder_svg
from src.services.storefront_service import Storefront

router = APIRouter(tags=["storefront"])


@router.get("/", response_class=HTMLResponse)
async def storefront_page(request: Request, storefront: Storefront = Depends(get_storefront)):
    view = await storefront.refresh()
    return render_storefront(view, current_ads(), str(request.url))


@router.get("/products/{product_id}/detail", response_class=HTMLResponse)
async def product_detail(
    product_id: int,
    storefront: Storefront = Depends(get_storefront),
    overlay: DetailOverlay = Depends(get_overlay),
):
    content = storefront.open_detail(overlay, product_id)
    return render_overlay(content)


@router.get(
    "/go/{action}/{asin}",
    dependencies=[rate_limit(limit=60, window_seconds=60, key_prefix="outbound")],
)
async def follow_product_link(
    action: Literal["buy", "reviews"],
    asin: str = Path(min_length=10, max_length=10, pattern=r"^[A-Za-z0-9]{10}$"),
    storefront: Storefront = Depends(get_storefront),
):
    target = storefront.follow_link(action, asin)
    return RedirectResponse(target, status_code=302)


@router.get("/manifest.json")
async def manifest():
    return web_manifest()


@router.get("/images/placeholder.svg")
async def placeholder_image():
    return Response(generate_placeholder_svg(PLACEHOLDER_LABEL), media_type="image/svg+xml")


@router.get("/images/error.svg")
async def error_image():
    return Response(generate_placeholder_svg(ERROR_LABEL, muted=True), media_type="image/svg+xml")
