import logging
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.config import settings

logger = logging.getLogger(__name__)


def _validate_origins(origins: list[str]) -> None:
    for origin in origins:
        parsed = urlparse(origin)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"CORS origin must be an http(s) origin: {origin!r}")
        if parsed.path not in ("", "/"):
            raise ValueError(f"CORS origin must not carry a path: {origin!r}")


def setup_cors(app: FastAPI) -> None:
    """Let other sites embedding the storefront call the JSON API. No cookies are involved."""
    origins = settings.cors_origins_list
    _validate_origins(origins)
    if not origins:
        logger.info("No CORS origins configured, API is same-origin only")
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID", "X-RateLimit-Limit", "X-RateLimit-Remaining", "Retry-After"],
        max_age=600,
    )
