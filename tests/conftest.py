from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from document_gateway.main import app
from document_gateway.db import close_store_connection, connect_to_store, get_document_store
from document_gateway.config import get_settings
from document_gateway.repositories.document_store import DocumentStoreClient


@pytest.fixture(autouse=True)
def _env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCUMENT_STORE_URI", "mongodb://localhost:27017/test")
    monkeypatch.setenv("DOCUMENT_STORE_DATABASE", "gateway-test")
    monkeypatch.setenv("DOCUMENT_STORE_KEY", "test-key")
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest_asyncio.fixture
async def mongo_client(monkeypatch: pytest.MonkeyPatch) -> AsyncIterator[AsyncMongoMockClient]:
    client = AsyncMongoMockClient()

    def _client_factory(*_args, **_kwargs) -> AsyncMongoMockClient:
        return client

    monkeypatch.setattr("document_gateway.db.AsyncIOMotorClient", _client_factory)
    yield client
    client.close()


@pytest_asyncio.fixture
async def store(mongo_client: AsyncMongoMockClient) -> AsyncIterator[DocumentStoreClient]:
    await connect_to_store()
    yield get_document_store()
    await close_store_connection()


@pytest_asyncio.fixture
async def api_client(store: DocumentStoreClient) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
