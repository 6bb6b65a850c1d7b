"""Repository layer wrapping the remote document store."""

from .document_store import DocumentStoreClient

__all__ = ["DocumentStoreClient"]
