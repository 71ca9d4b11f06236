import json
import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from src.integrations.feed.models import (
    FeedError,
    FeedNotConfiguredError,
    FeedResult,
    HttpError,
    NetworkError,
    ParseError,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class FeedClientProtocol(Protocol):
    async def fetch(self, url: str) -> FeedResult: ...


def _decode_body(body: bytes) -> list[Any]:
    if not body.strip():
        raise ParseError("Feed response body is empty")
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(f"Feed response is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ParseError(f"Feed response is a JSON {type(data).__name__}, expected an array")
    return data


class FeedClient:
    """Single-shot GET against the spreadsheet feed. No retries."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport

    async def fetch(self, url: str) -> FeedResult:
        if not url:
            return FeedResult.failure(FeedNotConfiguredError("Feed URL is not configured"))

        # Apps Script web apps answer with a redirect to the content host
        async with httpx.AsyncClient(transport=self._transport, follow_redirects=True) as client:
            try:
                resp = await client.get(url)
            except httpx.HTTPError as exc:
                logger.warning("Feed request to %s failed: %s", url, exc)
                return FeedResult.failure(NetworkError(str(exc) or type(exc).__name__))

        if not resp.is_success:
            logger.warning("Feed request to %s returned HTTP %d", url, resp.status_code)
            return FeedResult.failure(HttpError(resp.status_code))

        try:
            payloads = _decode_body(resp.content)
        except ParseError as exc:
            logger.warning("Feed response from %s rejected: %s", url, exc)
            return FeedResult.failure(exc)

        logger.info("Feed returned %d payloads", len(payloads))
        return FeedResult.success(payloads)


class FakeFeedClient:
    """Test double for FeedClient."""

    def __init__(
        self,
        payloads: list[Any] | None = None,
        error: FeedError | None = None,
    ) -> None:
        self._payloads = payloads or []
        self._error = error
        self.requested_urls: list[str] = []

    async def fetch(self, url: str) -> FeedResult:
        self.requested_urls.append(url)
        if self._error is not None:
            return FeedResult.failure(self._error)
        return FeedResult.success(list(self._payloads))
