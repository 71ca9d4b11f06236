"""Read-through cache for the storefront's static third-party assets.

A fixed manifest of URLs (fonts, icon sets, widget scripts) is pre-fetched on
install and served cache-first afterwards. The cache name embeds a digest of
the manifest, so editing the manifest always produces a new version, and
activation drops every cache that does not carry the current name.
"""
import hashlib
import logging
from collections.abc import Iterable
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

_FETCH_TIMEOUT = 20.0


@dataclass(frozen=True)
class CachedAsset:
    url: str
    status_code: int
    content_type: str
    body: bytes


class AssetFetchError(Exception):
    def __init__(self, url: str, reason: str):
        super().__init__(f"Could not fetch {url}: {reason}")
        self.url = url


def manifest_version(prefix: str, manifest: Iterable[str]) -> str:
    digest = hashlib.sha256("\n".join(manifest).encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"


class AssetCache:
    def __init__(
        self,
        prefix: str,
        manifest: Iterable[str],
        storage: dict[str, dict[str, CachedAsset]] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.manifest = tuple(dict.fromkeys(manifest))
        self.version = manifest_version(prefix, self.manifest)
        self._storage = storage if storage is not None else {}
        self._transport = transport

    @property
    def cache_names(self) -> list[str]:
        return sorted(self._storage)

    @property
    def cached_count(self) -> int:
        return len(self._storage.get(self.version, {}))

    def is_listed(self, url: str) -> bool:
        return url in self.manifest

    def _current(self) -> dict[str, CachedAsset]:
        return self._storage.setdefault(self.version, {})

    async def _download(self, client: httpx.AsyncClient, url: str) -> CachedAsset:
        try:
            resp = await client.get(url)
        except httpx.HTTPError as exc:
            raise AssetFetchError(url, str(exc) or type(exc).__name__) from exc
        if not resp.is_success:
            raise AssetFetchError(url, f"HTTP {resp.status_code}")
        return CachedAsset(
            url=url,
            status_code=resp.status_code,
            content_type=resp.headers.get("content-type", "application/octet-stream"),
            body=resp.content,
        )

    async def install(self) -> int:
        """Pre-fetch the manifest into the current cache. Individual failures are logged and skipped."""
        cache = self._current()
        async with httpx.AsyncClient(
            transport=self._transport, follow_redirects=True, timeout=_FETCH_TIMEOUT
        ) as client:
            for url in self.manifest:
                if url in cache:
                    continue
                try:
                    cache[url] = await self._download(client, url)
                except AssetFetchError as exc:
                    logger.warning("Asset pre-cache failed: %s", exc)
        logger.info(
            "Asset cache %s installed with %d of %d assets",
            self.version, len(cache), len(self.manifest),
        )
        return len(cache)

    def activate(self) -> list[str]:
        """Purge caches from other manifest versions. Returns the purged names."""
        stale = [name for name in self._storage if name != self.version]
        for name in stale:
            logger.info("Deleting old asset cache %s", name)
            del self._storage[name]
        return stale

    async def fetch(self, url: str) -> CachedAsset:
        """Cache-first, network-fallback. Network responses are not stored."""
        cached = self._current().get(url)
        if cached is not None:
            return cached
        async with httpx.AsyncClient(
            transport=self._transport, follow_redirects=True, timeout=_FETCH_TIMEOUT
        ) as client:
            return await self._download(client, url)
