"""Shared fixtures for the client store tests."""

import httpx
import pytest
import pytest_asyncio

from whispernotes.config import settings
from whispernotes.database.db import LocalStorage
from whispernotes.services.auth_client import AuthClient
from whispernotes.services.document import DocumentSurface
from tests.helpers import FailingStorage


@pytest_asyncio.fixture
async def storage(tmp_path):
    """A freshly initialized storage file per test."""
    local = LocalStorage(str(tmp_path / "whispernotes.db"))
    await local.initialize()
    return local


@pytest.fixture
def surface():
    return DocumentSurface(body_classes={"font-serif"})


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_RETRY_BASE_SECONDS", 0.0)
    monkeypatch.setattr(settings, "AUTH_RETRY_MAX_SECONDS", 0.0)


@pytest_asyncio.fixture
async def offline_auth():
    """Auth client with no backend configured."""
    client = AuthClient(base_url="")
    yield client
    await client.close()


@pytest_asyncio.fixture
async def auth_factory():
    """Build auth clients whose requests are answered by ``handler``."""
    clients: list[AuthClient] = []

    def make(handler, **kwargs) -> AuthClient:
        client = AuthClient(
            base_url="http://notes.test",
            transport=httpx.MockTransport(handler),
            **kwargs,
        )
        clients.append(client)
        return client

    yield make
    for client in clients:
        await client.close()


@pytest_asyncio.fixture
async def failing_storage(tmp_path):
    """Initialized storage whose writes can be made to fail mid-test."""
    local = FailingStorage(str(tmp_path / "failing.db"))
    await local.initialize()
    return local
