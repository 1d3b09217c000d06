"""Shared pytest fixtures for ClaimCheck tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.main import app


@pytest.fixture(autouse=True)
def reset_process_state():
    """Drop cached settings and restore default logging around each test.

    Tests set environment variables and the CLI redirects logging to stderr.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    configure_logging()


@pytest.fixture
async def client():
    """Async HTTP client bound to the admin API app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
