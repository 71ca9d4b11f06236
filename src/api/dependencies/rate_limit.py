from fastapi import Depends, Request

from src.api.middleware.rate_limit import _limiter, client_ip
from src.core.exceptions import RateLimitError


def rate_limit(limit: int = 60, window_seconds: int = 60, key_prefix: str = "endpoint"):
    """Per-endpoint limit layered on top of the middleware's path buckets, keyed by client IP."""

    async def _check(request: Request) -> None:
        allowed, retry_after, _remaining = _limiter.is_allowed(
            f"{key_prefix}:{client_ip(request)}", limit, window_seconds
        )
        if not allowed:
            raise RateLimitError(retry_after=retry_after)

    return Depends(_check)
