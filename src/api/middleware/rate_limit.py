import time
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from src.core.network import is_trusted_proxy

SWEEP_INTERVAL_SECONDS = 60


class SlidingWindowCounter:
    """In-memory sliding window rate limiter.

    Keys with no request left inside their window are dropped by ``sweep``,
    which ``is_allowed`` runs at most once per ``SWEEP_INTERVAL_SECONDS``.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._windows: dict[str, list[float]] = {}
        self._window_seconds: dict[str, int] = {}
        self._last_sweep = clock()

    def is_allowed(self, key: str, limit: int, window_seconds: int) -> tuple[bool, int, int]:
        now = self._clock()
        if now - self._last_sweep >= SWEEP_INTERVAL_SECONDS:
            self.sweep(now)

        cutoff = now - window_seconds
        requests = [t for t in self._windows.get(key, ()) if t > cutoff]

        if len(requests) >= limit:
            self._windows[key] = requests
            retry_after = int(requests[0] - cutoff) + 1
            return False, max(retry_after, 1), 0

        requests.append(now)
        self._windows[key] = requests
        self._window_seconds[key] = window_seconds
        remaining = limit - len(requests)
        return True, 0, remaining

    def sweep(self, now: float | None = None) -> int:
        """Drop keys with no request inside their window. Returns how many were dropped."""
        now = self._clock() if now is None else now
        self._last_sweep = now
        expired = [
            key for key, requests in self._windows.items()
            if not requests or requests[-1] <= now - self._window_seconds.get(key, 0)
        ]
        for key in expired:
            del self._windows[key]
            self._window_seconds.pop(key, None)
        return len(expired)

    def __len__(self) -> int:
        return len(self._windows)

    def reset(self) -> None:
        self._windows.clear()
        self._window_seconds.clear()


_limiter = SlidingWindowCounter()

# (path prefix, bucket, limit, window seconds); first match wins
_RULES: list[tuple[str, str, int, int]] = [
    ("/api/subscriptions", "subscribe", 5, 300),
    ("/api/chatbot", "chatbot", 30, 60),
    ("/api/assets", "assets", 120, 60),
]
_GLOBAL_LIMIT = 300
_EXEMPT_PATHS = ("/api/health", "/manifest.json")


def client_ip(request: Request) -> str:
    direct_ip = request.client.host if request.client else "unknown"
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded and is_trusted_proxy(direct_ip):
        return forwarded.split(",")[0].strip()
    return direct_ip


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        ip = client_ip(request)
        path = request.url.path

        if path in _EXEMPT_PATHS or path.startswith("/static/"):
            return await call_next(request)

        for prefix, bucket, limit, window in _RULES:
            if path.startswith(prefix):
                allowed, retry_after, remaining = _limiter.is_allowed(
                    f"{bucket}:{ip}", limit=limit, window_seconds=window
                )
                break
        else:
            limit = _GLOBAL_LIMIT
            allowed, retry_after, remaining = _limiter.is_allowed(
                f"global:{ip}", limit=limit, window_seconds=60
            )

        if not allowed:
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded"},
                headers={
                    "Retry-After": str(retry_after),
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
