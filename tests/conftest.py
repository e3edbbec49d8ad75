"""Pytest configuration and fixtures."""

import pytest
from typing import AsyncGenerator

from httpx import ASGITransport, AsyncClient

from config import Config
from lib.database.sqlite import URLShortenerSQLite
from lib.service import URLShortenerService
from lib.shortcode import ShortCodeGenerator
from lib.common.logging_config import setup_logging
from web_app import create_app
from web_app.rate_limit import limiter


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """The limiter is module level; start every test with empty counters."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'shortlink-test.db'}"


@pytest.fixture
async def test_db(db_url, logger) -> AsyncGenerator[URLShortenerSQLite, None]:
    """Create an opened SQLite store in a temporary directory."""
    db = URLShortenerSQLite(db_config=db_url, logger=logger)
    await db.open()

    yield db

    await db.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=8)


@pytest.fixture
async def service(test_db, short_code_generator, logger) -> URLShortenerService:
    """Create service instance."""
    return URLShortenerService(
        db=test_db,
        base_url="http://testserver",
        cache=None,  # No cache for tests
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
def config(db_url) -> Config:
    """Test configuration; ignores any .env file and disables rate limiting."""
    return Config(
        _env_file=None,
        database_url=db_url,
        base_url="http://testserver",
        rate_limit_enabled=False,
    )


@pytest.fixture
async def app(test_db, service, config, logger):
    """Create test FastAPI app."""
    return create_app(
        service_instance=service,
        config=config,
        logger=logger,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
