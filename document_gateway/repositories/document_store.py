"""Document store client: addressing, conditional writes and queries over MongoDB."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import orjson
from bson.errors import BSONError
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..db.collections import (
    DOCUMENT_ID_FIELD,
    PARTITION_KEY_FIELD,
    SYSTEM_FIELDS,
    ensure_document_indexes,
)
from ..models.outcome import (
    BadRequest,
    Created,
    Found,
    NotFound,
    Ok,
    Outcome,
    ReadFailed,
    ReadResult,
)
from .exceptions import DocumentStoreError, InvalidDocumentError, InvalidQueryError

LOGGER = logging.getLogger("uvicorn.error")

MISSING_ID_MESSAGE = "No valid 'id' field found in the document provided."
ALREADY_EXISTS_MESSAGE = "Unable to create document. The document may already exist."
NOT_FOUND_MESSAGE = "Entity with the specified id does not exist in the system."

# Remote failures plus the client-side BSON encoder and driver argument checks
STORE_ERRORS = (PyMongoError, BSONError, OverflowError, ValueError, TypeError)


def resource_location(database: str, collection: str, document_id: str) -> str:
    return f"dbs/{database}/colls/{collection}/docs/{document_id}"


def strip_system_fields(document: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in document.items() if key not in SYSTEM_FIELDS}


def parse_query_expression(expression: str) -> Dict[str, Any]:
    """Decode a JSON filter document; an empty expression matches everything."""

    text = (expression or "").strip()
    if not text:
        return {}
    try:
        parsed = orjson.loads(text)
    except orjson.JSONDecodeError as exc:
        raise InvalidQueryError(f"Query expression is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise InvalidQueryError("Query expression must be a JSON object.")
    return parsed


def _validate_document(document: Dict[str, Any]) -> str:
    document_id = document.get(DOCUMENT_ID_FIELD)
    if not isinstance(document_id, str) or not document_id:
        raise InvalidDocumentError(MISSING_ID_MESSAGE)
    for key in document:
        # top-level keys are update paths for the store; keep them literal
        if key.startswith("$") or "." in key:
            raise InvalidDocumentError(
                f"Invalid field name '{key}': field names must not start with '$' or contain '.'."
            )
    return document_id


class DocumentStoreClient:
    """Long-lived handle translating addressing tuples into store calls.

    Every public operation returns an :data:`Outcome`; store exceptions are
    caught at the call site and never escape this class.
    """

    def __init__(
        self,
        client: AsyncIOMotorClient,
        *,
        page_size: int = 100,
        max_items: int = 1000,
    ) -> None:
        self._client = client
        self._page_size = max(1, int(page_size))
        self._max_items = max(1, int(max_items))
        self._indexed: set[tuple[str, str]] = set()

    def collection(self, database: str, collection: str) -> AsyncIOMotorCollection:
        return self._client[database][collection]

    @staticmethod
    def _address(document_id: str, partition_key: str) -> Dict[str, Any]:
        return {DOCUMENT_ID_FIELD: document_id, PARTITION_KEY_FIELD: partition_key}

    async def _writable_collection(self, database: str, collection: str) -> AsyncIOMotorCollection:
        target = self.collection(database, collection)
        key = (database, collection)
        if key not in self._indexed:
            try:
                await ensure_document_indexes(target)
                self._indexed.add(key)
            except PyMongoError as exc:
                LOGGER.error("Failed to ensure indexes for %s.%s: %s", database, collection, exc)
        return target

    async def probe(
        self,
        database: str,
        collection: str,
        document_id: str,
        partition_key: str,
    ) -> ReadResult:
        try:
            doc = await self.collection(database, collection).find_one(
                self._address(document_id, partition_key)
            )
        except STORE_ERRORS as exc:
            LOGGER.warning("Read of %s/%s failed: %s", collection, document_id, exc)
            return ReadFailed(message=str(exc))
        if doc is None:
            return NotFound()
        return Found(document=strip_system_fields(doc))

    async def read(
        self,
        database: str,
        collection: str,
        document_id: str,
        partition_key: str,
    ) -> Outcome:
        result = await self.probe(database, collection, document_id, partition_key)
        if isinstance(result, Found):
            return Ok(payload=result.document)
        if isinstance(result, NotFound):
            return BadRequest(message=NOT_FOUND_MESSAGE)
        return BadRequest(message=result.message)

    async def create_if_not_exists(
        self,
        database: str,
        collection: str,
        document: Dict[str, Any],
        partition_key: str,
    ) -> Outcome:
        """Insert ``document`` unless its addressing tuple is already taken.

        A single conditional upsert decides existence and inserts atomically;
        an existing document is left untouched and reported as ``Ok``.
        """

        try:
            document_id = _validate_document(document)
        except DocumentStoreError as exc:
            return BadRequest(message=str(exc))

        resource = strip_system_fields(document)
        stored = {**resource, PARTITION_KEY_FIELD: partition_key}
        target = await self._writable_collection(database, collection)
        try:
            result = await target.update_one(
                self._address(document_id, partition_key),
                {"$setOnInsert": stored},
                upsert=True,
            )
        except DuplicateKeyError:
            LOGGER.debug("Concurrent create for %s/%s lost the race", collection, document_id)
            return BadRequest(message=ALREADY_EXISTS_MESSAGE)
        except STORE_ERRORS as exc:
            LOGGER.warning("Create of %s/%s failed: %s", collection, document_id, exc)
            return BadRequest(message=str(exc))

        if result.upserted_id is None:
            return Ok()
        return Created(
            location=resource_location(database, collection, document_id),
            payload=resource,
        )

    async def create_or_update(
        self,
        database: str,
        collection: str,
        document: Dict[str, Any],
        partition_key: str,
    ) -> Outcome:
        try:
            document_id = _validate_document(document)
        except DocumentStoreError as exc:
            return BadRequest(message=str(exc))

        stored = {**strip_system_fields(document), PARTITION_KEY_FIELD: partition_key}
        target = await self._writable_collection(database, collection)
        try:
            await target.replace_one(self._address(document_id, partition_key), stored, upsert=True)
        except STORE_ERRORS as exc:
            LOGGER.warning("Replace of %s/%s failed: %s", collection, document_id, exc)
            return BadRequest(message=str(exc))
        return Ok()

    async def delete(
        self,
        database: str,
        collection: str,
        document_id: str,
        partition_key: str,
    ) -> Outcome:
        try:
            result = await self.collection(database, collection).delete_one(
                self._address(document_id, partition_key)
            )
        except STORE_ERRORS as exc:
            LOGGER.warning("Delete of %s/%s failed: %s", collection, document_id, exc)
            return BadRequest(message=str(exc))
        if not result.deleted_count:
            return BadRequest(message=NOT_FOUND_MESSAGE)
        return Ok()

    async def query(
        self,
        database: str,
        collection: str,
        expression: str,
        partition_key: str,
    ) -> Outcome:
        return await self._run_query(database, collection, expression, partition_key)

    async def query_cross_partition(
        self,
        database: str,
        collection: str,
        expression: str,
    ) -> Outcome:
        return await self._run_query(database, collection, expression, None)

    async def _run_query(
        self,
        database: str,
        collection: str,
        expression: str,
        partition_key: Optional[str],
    ) -> Outcome:
        try:
            criteria = parse_query_expression(expression)
        except DocumentStoreError as exc:
            return BadRequest(message=str(exc))

        if partition_key is not None:
            scope = {PARTITION_KEY_FIELD: partition_key}
            criteria = {"$and": [criteria, scope]} if criteria else scope

        documents: List[Dict[str, Any]] = []
        try:
            cursor = self.collection(database, collection).find(
                criteria,
                batch_size=self._page_size,
            ).limit(self._max_items)
            async for doc in cursor:
                documents.append(strip_system_fields(doc))
        except STORE_ERRORS as exc:
            LOGGER.warning("Query on %s failed: %s", collection, exc)
            return BadRequest(message=str(exc))
        return Ok(payload=documents)


__all__ = [
    "ALREADY_EXISTS_MESSAGE",
    "DocumentStoreClient",
    "MISSING_ID_MESSAGE",
    "NOT_FOUND_MESSAGE",
    "parse_query_expression",
    "resource_location",
    "strip_system_fields",
]
