from fastapi import APIRouter, Depends

from src.api.dependencies.storefront import get_overlay
from src.mappers.product_card import overlay_to_dict
from src.models.dto.common import OverlayStateResponse, VideoStateRequest
from src.render.detail import DetailOverlay

router = APIRouter(prefix="/overlay", tags=["overlay"])


@router.get("", response_model=OverlayStateResponse)
async def overlay_state(overlay: DetailOverlay = Depends(get_overlay)):
    return overlay_to_dict(overlay)


@router.post("/video-state", response_model=OverlayStateResponse)
async def report_video_state(
    body: VideoStateRequest,
    overlay: DetailOverlay = Depends(get_overlay),
):
    overlay.video_state(body.state)
    return overlay_to_dict(overlay)


@router.post("/close", response_model=OverlayStateResponse)
async def close_overlay(overlay: DetailOverlay = Depends(get_overlay)):
    overlay.close()
    return overlay_to_dict(overlay)
