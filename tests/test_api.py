"""Tests for API endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from lib.database.sqlite import URLShortenerSQLite
from lib.service import URLShortenerService
from lib.shortcode import ShortCodeGenerator
from web_app import create_app


class RepeatingGenerator(ShortCodeGenerator):
    """Always returns the same code."""

    def generate_random(self, length=None):
        return "taken"


async def make_client(app):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


@pytest.mark.asyncio
class TestAPIEndpoints:
    """Test API endpoints."""

    async def test_shorten_url(self, client, sample_urls):
        """Test POST /api/shorten."""
        response = await client.post(
            "/api/shorten",
            json={"url": sample_urls[0]}
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["short_code"]) == 8
        assert data["original_url"] == sample_urls[0]
        assert data["short_url"] == f"http://testserver/{data['short_code']}"
        assert data["clicks"] == 0
        assert data["last_accessed"] is None
        assert isinstance(data["id"], int)

    async def test_shorten_with_custom_code(self, client, sample_urls):
        """Test POST /api/shorten with custom code."""
        response = await client.post(
            "/api/shorten",
            json={"url": sample_urls[0], "custom_code": "mycode"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["short_code"] == "mycode"
        assert data["short_url"] == "http://testserver/mycode"

    async def test_shorten_accepts_camel_case_custom_code(self, client, sample_urls):
        response = await client.post(
            "/api/shorten",
            json={"url": sample_urls[0], "customCode": "camel"}
        )

        assert response.status_code == 200
        assert response.json()["short_code"] == "camel"

    async def test_shorten_invalid_url(self, client):
        """Test POST /api/shorten with invalid URL."""
        response = await client.post(
            "/api/shorten",
            json={"url": "not-a-url"}
        )

        assert response.status_code == 400
        assert "Invalid URL" in response.json()["detail"]

    async def test_shorten_missing_url(self, client):
        response = await client.post("/api/shorten", json={})

        assert response.status_code == 422

    async def test_shorten_invalid_custom_code(self, client, sample_urls):
        response = await client.post(
            "/api/shorten",
            json={"url": sample_urls[0], "custom_code": "bad code!"}
        )

        assert response.status_code == 400
        assert "Invalid short code" in response.json()["detail"]

    async def test_shorten_duplicate_custom_code(self, client, sample_urls):
        """Test POST /api/shorten with a taken custom code."""
        first = await client.post(
            "/api/shorten",
            json={"url": sample_urls[0], "custom_code": "taken"}
        )
        assert first.status_code == 200

        response = await client.post(
            "/api/shorten",
            json={"url": sample_urls[1], "custom_code": "taken"}
        )

        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]

        # The original mapping is untouched
        stats = await client.get("/api/stats/taken")
        assert stats.json()["original_url"] == sample_urls[0]

    async def test_shorten_exhausted_retries(self, test_db, config, logger):
        await test_db.create_url("taken", "https://example.com/first")
        service = URLShortenerService(
            db=test_db,
            base_url="http://testserver",
            short_code_generator=RepeatingGenerator(),
            logger=logger,
        )
        app = create_app(service, config, logger=logger)

        async with await make_client(app) as client:
            response = await client.post("/api/shorten", json={"url": "https://example.com/second"})

        assert response.status_code == 503

    async def test_list_urls(self, client, sample_urls):
        """Test GET /api/urls returns newest first."""
        for url in sample_urls:
            await client.post("/api/shorten", json={"url": url})

        response = await client.get("/api/urls")

        assert response.status_code == 200
        data = response.json()
        assert [item["original_url"] for item in data] == list(reversed(sample_urls))

    async def test_list_urls_limit(self, client, sample_urls):
        for url in sample_urls:
            await client.post("/api/shorten", json={"url": url})

        response = await client.get("/api/urls", params={"limit": 1})

        assert response.status_code == 200
        assert len(response.json()) == 1

        response = await client.get("/api/urls", params={"limit": 0})
        assert response.status_code == 422

    async def test_list_urls_empty(self, client):
        response = await client.get("/api/urls")

        assert response.status_code == 200
        assert response.json() == []

    async def test_get_stats(self, client, sample_urls):
        """Test GET /api/stats/{short_code}."""
        create_response = await client.post(
            "/api/shorten",
            json={"url": sample_urls[0], "custom_code": "abc"}
        )
        assert create_response.status_code == 200

        for _ in range(3):
            redirect = await client.get("/abc")
            assert redirect.status_code == 302

        response = await client.get("/api/stats/abc")

        assert response.status_code == 200
        data = response.json()
        assert data["short_code"] == "abc"
        assert data["clicks"] == 3
        assert data["last_accessed"] is not None

    async def test_get_stats_not_found(self, client):
        """Test GET /api/stats/{short_code} for unknown code."""
        response = await client.get("/api/stats/nonexistent")

        assert response.status_code == 404
        assert response.json()["detail"] == "Short URL not found"

    async def test_delete_url(self, client, sample_urls):
        """Test DELETE /api/urls/{short_code}."""
        await client.post(
            "/api/shorten",
            json={"url": sample_urls[0], "custom_code": "todelete"}
        )

        response = await client.delete("/api/urls/todelete")
        assert response.status_code == 200
        assert response.json()["message"] == "URL deleted successfully"

        # Second delete reports not found
        response = await client.delete("/api/urls/todelete")
        assert response.status_code == 404

        response = await client.get("/todelete")
        assert response.status_code == 404

    async def test_health_check(self, client):
        """Test GET /api/health."""
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["cache"] == "healthy"
        assert "timestamp" in data

    async def test_security_headers(self, client):
        response = await client.get("/api/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"

    async def test_cors_preflight(self, client):
        response = await client.options(
            "/api/shorten",
            headers={
                "Origin": "http://example.org",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    async def test_storage_failure_returns_500(self, tmp_path, config, logger):
        """A store without its table fails every query."""
        db = URLShortenerSQLite(f"sqlite:///{tmp_path / 'broken.db'}", create_tables=False, logger=logger)
        await db.open()
        service = URLShortenerService(db=db, base_url="http://testserver", logger=logger)
        app = create_app(service, config, logger=logger)

        async with await make_client(app) as client:
            response = await client.get("/api/stats/abc")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}


@pytest.mark.asyncio
class TestRedirect:
    """Test the short code redirect route."""

    async def test_redirect(self, client, sample_urls):
        await client.post(
            "/api/shorten",
            json={"url": sample_urls[0], "custom_code": "go"}
        )

        response = await client.get("/go")

        assert response.status_code == 302
        assert response.headers["location"] == sample_urls[0]

    async def test_redirect_not_found(self, client):
        response = await client.get("/nonexistent")

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/html")
        assert "Short URL 'nonexistent' not found" in response.text

    async def test_not_found_page_escapes_code(self, client):
        response = await client.get("/<b>")

        assert response.status_code == 404
        assert "<b>" not in response.text
        assert "&lt;b&gt;" in response.text

    async def test_stats_lookup_does_not_count(self, client, sample_urls):
        await client.post(
            "/api/shorten",
            json={"url": sample_urls[0], "custom_code": "peek"}
        )

        await client.get("/api/stats/peek")
        response = await client.get("/api/stats/peek")

        assert response.json()["clicks"] == 0


@pytest.mark.asyncio
class TestRateLimit:
    """Per-client limits on /api routes."""

    @pytest.fixture
    async def limited_client(self, test_db, service, db_url, logger):
        config = Config(
            _env_file=None,
            database_url=db_url,
            base_url="http://testserver",
            rate_limit_enabled=True,
            rate_limit="2 per minute",
        )
        app = create_app(service, config, logger=logger)
        async with await make_client(app) as client:
            yield client

    async def test_limit_exceeded(self, limited_client):
        for _ in range(2):
            response = await limited_client.get("/api/urls")
            assert response.status_code == 200

        response = await limited_client.get("/api/urls")
        assert response.status_code == 429

    async def test_health_and_redirect_not_limited(self, limited_client):
        for _ in range(5):
            response = await limited_client.get("/api/health")
            assert response.status_code == 200

        for _ in range(5):
            response = await limited_client.get("/missing")
            assert response.status_code == 404
