import logging
from dataclasses import dataclass

import httpx
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

from src.core.config import settings
from src.core.logging import mask_email, mask_phone

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Please fill in all fields and agree to the terms."
INVALID_EMAIL_MESSAGE = "Please enter a valid email address."
SUCCESS_MESSAGE = "Thank you for subscribing! You will receive early deals."
UNAVAILABLE_MESSAGE = "Subscriptions are not available right now. Please try again later."


@dataclass
class SubscriptionOutcome:
    ok: bool
    message: str


def _failure(reason: str) -> SubscriptionOutcome:
    return SubscriptionOutcome(ok=False, message=f"Subscription failed: {reason}")


async def subscribe(
    email: str,
    whatsapp: str,
    terms: bool,
    *,
    url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SubscriptionOutcome:
    """Forward a deal-alert signup to the subscription endpoint."""
    email = email.strip()
    whatsapp = whatsapp.strip()
    if not email or not whatsapp or not terms:
        return SubscriptionOutcome(ok=False, message=MISSING_FIELDS_MESSAGE)
    try:
        _, email = validate_email(email)
    except PydanticCustomError:
        return SubscriptionOutcome(ok=False, message=INVALID_EMAIL_MESSAGE)

    endpoint = url if url is not None else settings.subscription_url
    if not endpoint:
        logger.warning("Subscription attempted but no subscription URL is configured")
        return SubscriptionOutcome(ok=False, message=UNAVAILABLE_MESSAGE)

    try:
        async with httpx.AsyncClient(transport=transport, follow_redirects=True, timeout=15.0) as client:
            resp = await client.post(
                endpoint,
                json={"email": email, "whatsapp": whatsapp, "terms": terms},
            )
    except httpx.HTTPError as exc:
        logger.warning("Subscription request failed for %s: %s", mask_email(email), exc)
        return _failure("we couldn't reach the subscription service.")

    if not resp.is_success:
        logger.warning("Subscription endpoint returned HTTP %d", resp.status_code)
        return _failure("Network response was not ok")

    try:
        data = resp.json()
    except ValueError:
        logger.warning("Subscription endpoint returned a non-JSON body")
        return _failure("unexpected response from the subscription service.")

    if isinstance(data, dict) and data.get("status") == "success":
        logger.info(
            "Subscribed %s (whatsapp %s)", mask_email(email), mask_phone(whatsapp),
        )
        return SubscriptionOutcome(ok=True, message=SUCCESS_MESSAGE)

    reason = data.get("message") if isinstance(data, dict) else None
    return _failure(str(reason) if reason else "unknown error")
