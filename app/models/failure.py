"""Closed representation of values raised by the external AI call.

Anything can be raised or rejected by a client library; the classifier first
maps the value onto one of these variants and then renders it.
"""
from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel


class StructuredFailure(BaseModel):
    """A failure exposing a message, optionally wrapping a cause."""

    message: str
    cause: Failure | None = None


class StringFailure(BaseModel):
    text: str


class OpaqueFailure(BaseModel):
    value: Any = None


Failure = Union[StructuredFailure, StringFailure, OpaqueFailure]

StructuredFailure.model_rebuild()
