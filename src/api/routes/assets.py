import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from src.api.dependencies.storefront import get_asset_cache
from src.core.exceptions import NotFoundError, UpstreamError
from src.models.dto.common import AssetManifestResponse
from src.services.asset_cache import AssetCache, AssetFetchError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assets", tags=["assets"])


@router.get("/manifest", response_model=AssetManifestResponse)
async def asset_manifest(cache: AssetCache = Depends(get_asset_cache)):
    return {
        "version": cache.version,
        "urls": list(cache.manifest),
        "cached": cache.cached_count,
    }


@router.get("")
async def get_asset(
    url: str = Query(..., max_length=2048),
    cache: AssetCache = Depends(get_asset_cache),
):
    if not cache.is_listed(url):
        raise NotFoundError("Asset is not part of the manifest")
    try:
        asset = await cache.fetch(url)
    except AssetFetchError as e:
        logger.warning("Asset fetch failed: %s", e)
        raise UpstreamError("Upstream asset unavailable") from e
    return Response(content=asset.body, media_type=asset.content_type)
