"""Reserved field names and index helpers for gateway-managed collections."""

from __future__ import annotations

from typing import Final

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING

DOCUMENT_ID_FIELD: Final[str] = "id"
PARTITION_KEY_FIELD: Final[str] = "_partitionKey"
SYSTEM_FIELDS: Final[tuple[str, ...]] = ("_id", PARTITION_KEY_FIELD)

ADDRESS_INDEX_NAME: Final[str] = "id_partition_unique"


async def ensure_document_indexes(collection: AsyncIOMotorCollection) -> None:
    # (id, partition key) is the addressing tuple within a collection
    await collection.create_index(
        [(DOCUMENT_ID_FIELD, ASCENDING), (PARTITION_KEY_FIELD, ASCENDING)],
        name=ADDRESS_INDEX_NAME,
        unique=True,
    )
    await collection.create_index([(PARTITION_KEY_FIELD, ASCENDING)], name="partition_idx")


__all__ = [
    "ADDRESS_INDEX_NAME",
    "DOCUMENT_ID_FIELD",
    "PARTITION_KEY_FIELD",
    "SYSTEM_FIELDS",
    "ensure_document_indexes",
]
