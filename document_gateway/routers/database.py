"""REST routes mapping 1:1 onto the document store client operations."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response, status
from fastapi.responses import ORJSONResponse

from ..config import Settings, get_settings
from ..db import get_document_store
from ..models.outcome import BadRequest, Created, Ok, Outcome
from ..repositories.document_store import DocumentStoreClient

router = APIRouter()


def render_outcome(outcome: Outcome) -> Response:
    if isinstance(outcome, Created):
        return ORJSONResponse(
            outcome.payload,
            status_code=status.HTTP_201_CREATED,
            headers={"Location": outcome.location},
        )
    if isinstance(outcome, BadRequest):
        return ORJSONResponse(outcome.message, status_code=status.HTTP_400_BAD_REQUEST)
    if isinstance(outcome, Ok) and outcome.payload is not None:
        return ORJSONResponse(outcome.payload)
    return Response(status_code=status.HTTP_200_OK)


@router.get("/get-document/{collection}/{document_id}/{partition_key}")
async def get_document(
    collection: str,
    document_id: str,
    partition_key: str,
    store: DocumentStoreClient = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    outcome = await store.read(settings.database_name, collection, document_id, partition_key)
    return render_outcome(outcome)


@router.get("/query-documents/{collection}/{query:path}/{partition_key}")
async def query_documents(
    collection: str,
    query: str,
    partition_key: str,
    store: DocumentStoreClient = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    outcome = await store.query(settings.database_name, collection, query, partition_key)
    return render_outcome(outcome)


@router.get("/query-documents-cross-partition/{collection}/{query:path}")
async def query_documents_cross_partition(
    collection: str,
    query: str,
    store: DocumentStoreClient = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    outcome = await store.query_cross_partition(settings.database_name, collection, query)
    return render_outcome(outcome)


@router.post("/create-if-not-exists/{collection}/{partition_key}")
async def create_if_not_exists(
    collection: str,
    partition_key: str,
    document: Dict[str, Any] = Body(...),
    store: DocumentStoreClient = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    outcome = await store.create_if_not_exists(
        settings.database_name, collection, document, partition_key
    )
    return render_outcome(outcome)


@router.post("/create-or-update-document/{collection}/{partition_key}")
async def create_or_update_document(
    collection: str,
    partition_key: str,
    document: Dict[str, Any] = Body(...),
    store: DocumentStoreClient = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    outcome = await store.create_or_update(
        settings.database_name, collection, document, partition_key
    )
    return render_outcome(outcome)


@router.delete("/delete-document/{collection}/{document_id}/{partition_key}")
async def delete_document(
    collection: str,
    document_id: str,
    partition_key: str,
    store: DocumentStoreClient = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
) -> Response:
    outcome = await store.delete(settings.database_name, collection, document_id, partition_key)
    return render_outcome(outcome)


__all__ = ["router", "render_outcome"]
