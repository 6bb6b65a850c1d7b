"""Result types returned by the document store client."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Ok(BaseModel):
    """Operation succeeded; ``payload`` is ``None`` when there is nothing to return."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ok"] = "ok"
    payload: Optional[Any] = None


class Created(BaseModel):
    """A new document was written to the store."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["created"] = "created"
    location: str
    payload: Dict[str, Any] = Field(default_factory=dict)


class BadRequest(BaseModel):
    """Any failure, local or remote, reported back to the caller."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bad_request"] = "bad_request"
    message: str


Outcome = Union[Ok, Created, BadRequest]


class Found(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["found"] = "found"
    document: Dict[str, Any]


class NotFound(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["not_found"] = "not_found"


class ReadFailed(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["read_failed"] = "read_failed"
    message: str


ReadResult = Union[Found, NotFound, ReadFailed]


__all__ = [
    "BadRequest",
    "Created",
    "Found",
    "NotFound",
    "Ok",
    "Outcome",
    "ReadFailed",
    "ReadResult",
]
