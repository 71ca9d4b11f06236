import uuid

from fastapi import Depends, Request

from src.render.detail import DetailOverlay
from src.services.asset_cache import AssetCache
from src.services.storefront_service import Storefront

SESSION_KEY = "sid"


def get_storefront(request: Request) -> Storefront:
    return request.app.state.storefront


def get_asset_cache(request: Request) -> AssetCache:
    return request.app.state.asset_cache


def get_overlay(
    request: Request,
    storefront: Storefront = Depends(get_storefront),
) -> DetailOverlay:
    """The calling visitor's detail overlay, keyed by the session cookie."""
    session_id = request.session.get(SESSION_KEY)
    if not session_id:
        session_id = uuid.uuid4().hex
        request.session[SESSION_KEY] = session_id
    return storefront.overlay_for(session_id)
