"""
Shared pytest fixtures for farmOS client tests.

Every test talks to a real in-process farmOS server through
``httpx.ASGITransport``; no HTTP layer is mocked.
"""

import pytest
import pytest_asyncio

from farmos_client import FarmOSClient, farmOS
from tests.infrastructure.farmos_test_server import BASE_URL, FarmOSTestServer


@pytest.fixture
def farm_server() -> FarmOSTestServer:
    """A fresh farmOS test server with a small page size."""
    return FarmOSTestServer()


@pytest_asyncio.fixture
async def farm(farm_server):
    """Unauthorized client connected to the test server."""
    client = farmOS(BASE_URL, transport=farm_server.transport())
    try:
        yield client
    finally:
        await client.close()


@pytest_asyncio.fixture
async def authorized_farm(farm) -> FarmOSClient:
    """Client that has completed the password grant as ``farmer``."""
    await farm.authorize("farmer", "farmpass")
    return farm
