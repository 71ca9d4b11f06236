from fastapi import APIRouter, Query

from src.models.dto.common import AdSlotResponse
from src.services.ads_service import current_ads

router = APIRouter(prefix="/ads", tags=["ads"])


@router.get("", response_model=list[AdSlotResponse])
async def list_ads(at_ms: int | None = Query(None, ge=0)):
    slots = []
    for slot, state in current_ads(at_ms).items():
        if state is None:
            slots.append({"slot": slot})
        else:
            slots.append({"slot": slot, "text": state.text, "remaining_ms": state.remaining_ms})
    return slots
