from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from ..config import Settings, get_settings

if TYPE_CHECKING:
    from ..repositories.document_store import DocumentStoreClient

_client: Optional[AsyncIOMotorClient] = None
_db: Optional[AsyncIOMotorDatabase] = None
_store: Optional[DocumentStoreClient] = None


def _client_options(settings: Settings) -> dict[str, Any]:
    options: dict[str, Any] = {
        "maxPoolSize": 20,
        "serverSelectionTimeoutMS": settings.server_selection_timeout_ms,
        "connectTimeoutMS": settings.connect_timeout_ms,
        "socketTimeoutMS": settings.socket_timeout_ms,
    }
    if settings.store_direct:
        options["directConnection"] = True
    if settings.store_key:
        options["password"] = settings.store_key
        if settings.store_username:
            options["username"] = settings.store_username
    return options


async def connect_to_store() -> None:
    """Open the shared store connection and build the document store client."""

    global _client, _db, _store

    settings = get_settings()
    if not settings.store_uri and not settings.store_alt_uri:
        raise RuntimeError("Missing DOCUMENT_STORE_URI env var for document-gateway")

    logger = logging.getLogger("uvicorn.error")

    async def _try_connect(uri: str) -> tuple[AsyncIOMotorClient, AsyncIOMotorDatabase]:
        client = AsyncIOMotorClient(uri, **_client_options(settings))
        db = client[settings.database_name]
        await client.admin.command("ping")
        return client, db

    primary_error: Optional[Exception] = None

    if settings.store_uri:
        try:
            _client, _db = await _try_connect(settings.store_uri)
            logger.info("Document store connected: db=%s", settings.database_name)
        except Exception as exc:  # pragma: no cover - connection issues asserted in tests
            primary_error = exc
            logger.error("Document store primary URI failed: %s", exc)

    if _client is None and settings.store_alt_uri:
        try:
            _client, _db = await _try_connect(settings.store_alt_uri)
            logger.info("Document store connected via ALT URI: db=%s", settings.database_name)
        except Exception as exc:  # pragma: no cover - same as above
            logger.error("Document store ALT URI failed: %s", exc)

    if _client is None or _db is None:
        raise primary_error or RuntimeError("Document store connection failed")

    from ..repositories.document_store import DocumentStoreClient

    _store = DocumentStoreClient(
        _client,
        page_size=settings.query_page_size,
        max_items=settings.query_max_items,
    )


async def close_store_connection() -> None:
    """Close the store client if it is initialised."""

    global _client, _db, _store
    if _client:
        try:
            _client.close()
        finally:
            logging.getLogger("uvicorn.error").info("Document store connection closed")
        _client = None
        _db = None
        _store = None


def is_connected() -> bool:
    return _client is not None and _db is not None


def get_client() -> AsyncIOMotorClient:
    if _client is None:
        raise RuntimeError("Store client not initialised. Did you call connect_to_store()?")
    return _client


def get_db() -> AsyncIOMotorDatabase:
    if _db is None:
        raise RuntimeError("Document store not connected. Did you call connect_to_store()?")
    return _db


def get_document_store() -> DocumentStoreClient:
    if _store is None:
        raise RuntimeError("Document store not connected. Did you call connect_to_store()?")
    return _store


__all__ = [
    "connect_to_store",
    "close_store_connection",
    "is_connected",
    "get_client",
    "get_db",
    "get_document_store",
]
