from urllib.parse import urlparse

from pydantic_settings import BaseSettings

DEFAULT_ASSET_MANIFEST = [
    "https://cdn.tailwindcss.com",
    "https://fonts.googleapis.com/css2?family=Inter:wght@400;600&family=Roboto:wght@700&display=swap",
    "https://fonts.googleapis.com/icon?family=Material+Icons",
    "https://www.youtube.com/iframe_api",
    "https://flagcdn.com/us.svg",
]


class Settings(BaseSettings):
    # Product feed (spreadsheet web-app endpoint returning a JSON array)
    feed_url: str = ""

    # Amazon Associates
    affiliate_tag: str = "your-amazon-affiliate-tag-20"

    # Subscription form endpoint
    subscription_url: str = ""

    # Storefront
    store_title: str = "Hygiene & Cleaning Products"
    placeholder_video_id: str = "dQw4w9WgXcQ"

    # Static asset cache
    asset_cache_prefix: str = "hygiene-cleaning-store-cache"
    asset_manifest: list[str] = DEFAULT_ASSET_MANIFEST
    asset_prefetch_on_startup: bool = True

    # Peers allowed to set X-Forwarded-For (CIDR list)
    trusted_proxies: str = "127.0.0.0/8,10.0.0.0/8,172.16.0.0/12,192.168.0.0/16,::1/128"

    # CORS
    cors_allowed_origins: str = "http://localhost:8000"

    # Signs the visitor session cookie. Empty means a random per-process key,
    # so overlay sessions do not survive a restart.
    secret_key: str = ""

    # App
    debug: bool = False
    backend_url: str = "http://localhost:8000"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    model_config = {"env_file": ".env", "extra": "ignore"}

    def validate_urls(self) -> None:
        """Raise if a configured endpoint is not a usable http(s) URL."""
        for url_name in ("feed_url", "subscription_url", "backend_url"):
            url_val = getattr(self, url_name)
            if not url_val:
                continue
            parsed = urlparse(url_val)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(f"{url_name} must be a valid http(s) URL")
        for url_val in self.asset_manifest:
            parsed = urlparse(url_val)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(f"asset_manifest entry {url_val!r} must be an absolute http(s) URL")
        if not self.affiliate_tag.strip():
            raise ValueError("affiliate_tag must not be empty")
        if self.secret_key and len(self.secret_key) < 32:
            raise ValueError("secret_key must be at least 32 characters")


settings = Settings()
