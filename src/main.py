import logging
import secrets
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from src.core.config import settings
from src.core.logging import setup_logging

setup_logging(debug=settings.debug)

from src.api.middleware.cors import setup_cors
from src.api.middleware.rate_limit import RateLimitMiddleware
from src.api.middleware.request_id import RequestIdMiddleware
from src.api.middleware.security_headers import SecurityHeadersMiddleware
from src.api.routes import ads, assets, chatbot, health, overlay, products, storefront, subscriptions
from src.core.tasks import cancel_background_tasks, create_background_task
from src.services.asset_cache import AssetCache
from src.services.storefront_service import build_storefront

logger = logging.getLogger(__name__)

try:
    settings.validate_urls()
except ValueError as e:
    logger.critical("Configuration validation failed: %s", e)
    raise SystemExit(f"FATAL: {e}") from e


async def _prefetch_assets(cache: AssetCache) -> None:
    await cache.install()
    cache.activate()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.storefront = build_storefront()
    app.state.asset_cache = AssetCache(settings.asset_cache_prefix, settings.asset_manifest)
    if not settings.feed_url:
        logger.warning("FEED_URL is not set, the storefront will show the sample product")
    if settings.asset_prefetch_on_startup:
        create_background_task(_prefetch_assets(app.state.asset_cache), name="asset-prefetch")
    yield
    await cancel_background_tasks()


app = FastAPI(
    title="Affiliate Storefront",
    version="1.0.0",
    lifespan=lifespan,
)

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )

setup_cors(app)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key or secrets.token_urlsafe(32),
    https_only=settings.backend_url.startswith("https"),
    same_site="lax",
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestIdMiddleware)

# HTML surface
app.include_router(storefront.router)

# JSON API
app.include_router(health.router, prefix="/api")
app.include_router(products.router, prefix="/api")
app.include_router(overlay.router, prefix="/api")
app.include_router(subscriptions.router, prefix="/api")
app.include_router(chatbot.router, prefix="/api")
app.include_router(ads.router, prefix="/api")
app.include_router(assets.router, prefix="/api")

app.mount("/static", StaticFiles(directory=str(Path(__file__).parent / "static")), name="static")
