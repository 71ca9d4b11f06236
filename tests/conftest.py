import pytest

from src.api.middleware.rate_limit import _limiter
from src.integrations.feed.client import FakeFeedClient
from src.services.storefront_service import Storefront
from tests.factories import make_camel_payload, make_display_payload

FEED_URL = "https://feed.example.com/exec"
AFFILIATE_TAG = "teststore-20"
FALLBACK_VIDEO_ID = "fallbackVid1"


# ── Patch settings before any other import ──────────────────────────────────
@pytest.fixture(autouse=True)
def _patch_settings(monkeypatch):
    from src.core.config import settings
    monkeypatch.setattr(settings, "feed_url", FEED_URL)
    monkeypatch.setattr(settings, "affiliate_tag", AFFILIATE_TAG)
    monkeypatch.setattr(settings, "placeholder_video_id", FALLBACK_VIDEO_ID)
    monkeypatch.setattr(settings, "subscription_url", "https://subscribe.example.com/exec")


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    _limiter.reset()
    yield
    _limiter.reset()


@pytest.fixture
def feed_payloads():
    return [
        make_display_payload(product_id=1, verified=True),
        make_camel_payload(product_id=2),
        make_display_payload(product_id=3, name="Floor Cleaner", asin="", retail_price=0),
    ]


@pytest.fixture
def fake_feed(feed_payloads):
    return FakeFeedClient(payloads=feed_payloads)


@pytest.fixture
def storefront(fake_feed):
    return Storefront(
        fake_feed,
        feed_url=FEED_URL,
        affiliate_tag=AFFILIATE_TAG,
        fallback_video_id=FALLBACK_VIDEO_ID,
    )
