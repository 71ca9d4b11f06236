import logging

import pytest
from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from httpx import ASGITransport, AsyncClient

from src.api.middleware.request_id import RequestIdMiddleware
from src.api.middleware.security_headers import API_CSP, PAGE_CSP, SecurityHeadersMiddleware
from src.core.config import Settings
from src.core.logging import JSONFormatter, mask_email, mask_phone


@pytest.fixture
def app():
    _app = FastAPI()

    @_app.get("/", response_class=HTMLResponse)
    async def _page():
        return "<html></html>"

    @_app.get("/api/thing")
    async def _thing():
        return {"ok": True}

    @_app.post("/api/thing")
    async def _post_thing():
        return {"ok": True}

    _app.add_middleware(SecurityHeadersMiddleware)
    _app.add_middleware(RequestIdMiddleware)
    return _app


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestSecurityHeaders:
    @pytest.mark.asyncio
    async def test_html_gets_page_policy(self, client):
        resp = await client.get("/")
        assert resp.headers["Content-Security-Policy"] == PAGE_CSP
        assert "https://www.youtube.com" in PAGE_CSP
        assert resp.headers["X-Content-Type-Options"] == "nosniff"

    @pytest.mark.asyncio
    async def test_json_gets_locked_down_policy(self, client):
        resp = await client.get("/api/thing")
        assert resp.headers["Content-Security-Policy"] == API_CSP
        assert resp.headers["Cache-Control"] == "no-store"

    @pytest.mark.asyncio
    async def test_oversized_body_rejected(self, client):
        resp = await client.post("/api/thing", content=b"x" * (65 * 1024))
        assert resp.status_code == 413


class TestRequestId:
    @pytest.mark.asyncio
    async def test_generated(self, client):
        resp = await client.get("/api/thing")
        assert len(resp.headers["X-Request-ID"]) == 36

    @pytest.mark.asyncio
    async def test_client_id_echoed(self, client):
        resp = await client.get("/api/thing", headers={"X-Request-ID": "abc-123"})
        assert resp.headers["X-Request-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_invalid_client_id_replaced(self, client):
        resp = await client.get("/api/thing", headers={"X-Request-ID": "bad id!"})
        assert resp.headers["X-Request-ID"] != "bad id!"


class TestLogging:
    def test_masking(self):
        assert mask_email("jane.doe@example.com") == "ja***@example.com"
        assert mask_phone("+1 555 0100") == "***100"
        assert mask_phone("12") == "***"

    def test_sensitive_extras_are_redacted(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", (), None)
        record.email = "jane@example.com"
        record.count = 3
        output = JSONFormatter().format(record)
        assert "jane@example.com" not in output
        assert '"count": 3' in output


class TestSettings:
    def test_defaults_validate(self):
        Settings(_env_file=None).validate_urls()

    def test_bad_feed_url(self):
        with pytest.raises(ValueError, match="feed_url"):
            Settings(_env_file=None, feed_url="ftp://example.com/feed").validate_urls()

    def test_empty_affiliate_tag(self):
        with pytest.raises(ValueError, match="affiliate_tag"):
            Settings(_env_file=None, affiliate_tag=" ").validate_urls()

    def test_short_secret_key(self):
        with pytest.raises(ValueError, match="secret_key"):
            Settings(_env_file=None, secret_key="too-short").validate_urls()

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_allowed_origins="http://a.test, http://b.test,")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]


class TestTrustedProxies:
    def test_parse_skips_invalid_entries(self):
        from src.core.network import parse_networks

        assert [str(n) for n in parse_networks("10.0.0.0/8, nonsense ,::1")] == ["10.0.0.0/8", "::1/128"]

    def test_configured_list_is_used(self, monkeypatch):
        from src.core.config import settings
        from src.core.network import is_trusted_proxy

        monkeypatch.setattr(settings, "trusted_proxies", "203.0.113.0/24")
        assert is_trusted_proxy("203.0.113.5")
        assert not is_trusted_proxy("10.0.0.1")
        assert not is_trusted_proxy("not-an-ip")
