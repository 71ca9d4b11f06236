from fastapi import APIRouter, Depends, Request

from src.api.dependencies.storefront import get_storefront
from src.core.config import settings
from src.models.dto.health import HealthDetailedResponse
from src.services.storefront_service import Storefront

router = APIRouter(tags=["health"])


def _check_feed(storefront: Storefront) -> dict:
    if not settings.feed_url:
        return {"status": "not_configured"}
    return {
        "status": "configured",
        "last_state": storefront.latest.state.value if storefront.latest_pass else None,
        "generation": storefront.latest_pass,
    }


def _check_assets(request: Request) -> dict:
    cache = request.app.state.asset_cache
    return {
        "status": "ok",
        "version": cache.version,
        "cached": cache.cached_count,
        "listed": len(cache.manifest),
    }


@router.get("/health", response_model=HealthDetailedResponse)
async def health_check(request: Request, storefront: Storefront = Depends(get_storefront)):
    checks = {
        "feed": _check_feed(storefront),
        "assets": _check_assets(request),
    }
    return {
        "status": "healthy",
        "version": "1.0.0",
        "checks": checks,
    }
