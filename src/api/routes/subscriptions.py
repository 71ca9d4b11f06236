from fastapi import APIRouter

from src.models.dto.common import SubscriptionRequest, SubscriptionResponse
from src.services import subscription_service

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("", response_model=SubscriptionResponse)
async def create_subscription(body: SubscriptionRequest):
    outcome = await subscription_service.subscribe(body.email, body.whatsapp, body.terms)
    return {"ok": outcome.ok, "message": outcome.message}
