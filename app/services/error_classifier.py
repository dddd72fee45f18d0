"""Turn arbitrary failures from the AI call into user-facing messages.

Client libraries raise exceptions, but wrapped transports can also hand back
plain strings, dicts or objects of unknown shape. :func:`classify_error`
accepts any of these and always returns a non-empty string.
"""
from __future__ import annotations

import enum
import json
import logging
import re
from typing import Any

from app.models import Failure, OpaqueFailure, StringFailure, StructuredFailure

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."
DEFAULT_MAX_LENGTH = 500

_MESSAGE_FIELDS = ("message", "details")

# Default repr() of plain objects, e.g. "<foo.Bar object at 0x7f...>"
_DEFAULT_REPR_RE = re.compile(r"^<[\w.]+ object at 0x[0-9a-fA-F]+>$")
_UNINFORMATIVE = frozenset({"", "None", "null", "{}", "[]", "()", '""'})

_CREDENTIALS_RE = re.compile(
    r"api[ _-]?key|gemini_api_key|google_api_key|permission[ _]?denied|\biam\b"
    r"|credential|authenticat|authoriz|forbidden",
    re.IGNORECASE,
)
_SAFETY_RE = re.compile(r"blocked due to safety", re.IGNORECASE)
_REGION_RE = re.compile(r"location is not supported", re.IGNORECASE)


class ErrorCategory(str, enum.Enum):
    CREDENTIALS = "credentials"
    SAFETY = "safety"
    REGION = "region"
    GENERIC = "generic"


# ---------------------------------------------------------------------------
# Failure extraction
# ---------------------------------------------------------------------------


def _message_of(value: Any) -> str | None:
    if isinstance(value, dict):
        candidates = [value.get(name) for name in _MESSAGE_FIELDS]
    else:
        candidates = [getattr(value, name, None) for name in _MESSAGE_FIELDS]
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate
    return None


def _cause_of(value: Any) -> Any:
    if isinstance(value, BaseException):
        return value.__cause__
    if isinstance(value, dict):
        return value.get("cause")
    return getattr(value, "cause", None)


def to_failure(value: Any, *, _depth: int = 0) -> Failure:
    """Map an arbitrary raised value onto the :data:`Failure` variants.

    Nested causes are followed one level only.
    """

    if isinstance(value, str):
        return StringFailure(text=value)

    message = _message_of(value)
    if message is None and isinstance(value, BaseException):
        message = str(value) or type(value).__name__

    if message is None:
        return OpaqueFailure(value=value)

    cause = _cause_of(value)
    nested = to_failure(cause, _depth=_depth + 1) if cause is not None and _depth == 0 else None
    return StructuredFailure(message=message, cause=nested)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _render_opaque(value: Any) -> str:
    try:
        text = str(value).strip()
    except Exception:
        text = ""
    if text not in _UNINFORMATIVE and not _DEFAULT_REPR_RE.match(text):
        return text
    try:
        dumped = json.dumps(value)
    except (TypeError, ValueError):
        return UNKNOWN_ERROR_MESSAGE
    if dumped in _UNINFORMATIVE:
        return UNKNOWN_ERROR_MESSAGE
    return dumped


def describe_failure(failure: Failure) -> str:
    """Render a failure as plain text, appending one level of nested cause."""

    if isinstance(failure, StringFailure):
        return failure.text.strip() or UNKNOWN_ERROR_MESSAGE
    if isinstance(failure, OpaqueFailure):
        return _render_opaque(failure.value)

    text = failure.message.strip()
    if failure.cause is not None:
        text += f" | Nested cause: {describe_failure(failure.cause)}"
    return text


def categorize(text: str) -> ErrorCategory:
    if _CREDENTIALS_RE.search(text):
        return ErrorCategory.CREDENTIALS
    if _SAFETY_RE.search(text):
        return ErrorCategory.SAFETY
    if _REGION_RE.search(text):
        return ErrorCategory.REGION
    return ErrorCategory.GENERIC


def _truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3].rstrip() + "..."


def format_message(category: ErrorCategory, text: str, *, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    if category is ErrorCategory.CREDENTIALS:
        return (
            f"API Key or Permissions Error: {_truncate(text, max_length)}. Please ensure your "
            "GEMINI_API_KEY is correctly set in your .env file, the server is restarted, and the "
            "key has the necessary permissions for the Gemini API."
        )
    if category is ErrorCategory.SAFETY:
        return (
            "The image was blocked due to safety settings of the AI service. "
            "Please try a different image."
        )
    if category is ErrorCategory.REGION:
        return "The AI service is not available in your location (user location is not supported)."
    return f"AI Flow Error: {_truncate(text, max_length)}"


def classify_error(value: Any, *, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Return a user-facing message for *value*. Never raises."""

    try:
        text = describe_failure(to_failure(value)) or UNKNOWN_ERROR_MESSAGE
        return format_message(categorize(text), text, max_length=max_length)
    except Exception:  # pragma: no cover
        logger.exception("Failed to classify error value of type %s", type(value).__name__)
        return UNKNOWN_ERROR_MESSAGE
