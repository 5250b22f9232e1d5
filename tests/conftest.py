"""
Test Configuration
==================

Pytest fixtures for zkReserves tests.
"""

import os
from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["REGISTRY_MODE"] = "mock"

from zkreserves.core.hashing import Sha256FieldHasher  # noqa: E402
from zkreserves.registry import (  # noqa: E402
    MockRegistryClient,
    reset_registry_client,
    set_registry_client,
)


SAMPLE_CSV = """account_id,amount
alice,10000
bob,20000
carol,15000
dave,25000
eve,15000
"""


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def hasher() -> Sha256FieldHasher:
    """Field hasher over the default modulus."""
    return Sha256FieldHasher()


@pytest.fixture
def sample_csv() -> str:
    """Five accounts totalling 85000 satoshi."""
    return SAMPLE_CSV


@pytest.fixture
def registry() -> Generator[MockRegistryClient, None, None]:
    """Fresh mock registry installed as the global client."""
    client = MockRegistryClient()
    set_registry_client(client)
    yield client
    reset_registry_client()


@pytest_asyncio.fixture
async def verification_client(
    registry: MockRegistryClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Verification Service."""
    from services.verification.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
