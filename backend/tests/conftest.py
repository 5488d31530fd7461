from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from bureauto.main import app


@pytest.fixture(autouse=True)
def no_redis():
    """Keep the filter-options cache out of every test (always a miss)."""
    with (
        patch("bureauto.services.advertisement.cache_get", AsyncMock(return_value=None)) as get,
        patch("bureauto.services.advertisement.cache_set", AsyncMock()) as set_,
        patch("bureauto.services.advertisement.cache_delete", AsyncMock()) as delete,
    ):
        yield {"get": get, "set": set_, "delete": delete}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client wired to the FastAPI app (no real server)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
