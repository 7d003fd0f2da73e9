from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from kf_dashboard.config import get_settings
from kf_dashboard.main import app
from kf_dashboard.services.model_registry import close_registry_client, set_registry_client


REGISTRY_URL = "http://model-registry.test/api/v1/model_registry"


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODEL_REGISTRY_URL", REGISTRY_URL)
    monkeypatch.setenv("MODEL_REGISTRY_TIMEOUT_SECONDS", "2")
    get_settings.cache_clear()
    set_registry_client(None)

    yield

    set_registry_client(None)
    get_settings.cache_clear()


@pytest.fixture
async def api_client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await close_registry_client()
