"""Root conftest: shared app and client fixtures.

Invariants:
    - Every test gets a fresh FastAPI app (no routes leak between tests)
    - Clients talk to the app in-process through httpx ASGITransport
"""

import os

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

# Keep developer .env / shell settings out of the tests
for _key in [k for k in os.environ if k.startswith("GENAPI_")]:
    del os.environ[_key]

from genapi.config import Settings, get_settings  # noqa: E402
from genapi.sample.server import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def app() -> FastAPI:
    return FastAPI()


@pytest.fixture
async def app_client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def sample_app() -> FastAPI:
    return create_app(Settings(_env_file=None, log_format="text"))


@pytest.fixture
async def client(sample_app):
    async with AsyncClient(
        transport=ASGITransport(app=sample_app), base_url="http://test",
    ) as c:
        yield c
