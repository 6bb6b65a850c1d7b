"""Custom exceptions for the repository layer."""

from __future__ import annotations


class DocumentStoreError(RuntimeError):
    """Base exception raised when a document store operation cannot proceed."""


class InvalidDocumentError(DocumentStoreError, ValueError):
    """Raised when a document lacks a usable string ``id`` field."""


class InvalidQueryError(DocumentStoreError, ValueError):
    """Raised when a query expression is not a JSON filter object."""


__all__ = [
    "DocumentStoreError",
    "InvalidDocumentError",
    "InvalidQueryError",
]
