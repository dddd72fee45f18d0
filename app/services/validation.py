"""Input validation run before any network call is made."""
from __future__ import annotations

import logging

from pydantic import HttpUrl, TypeAdapter, ValidationError

from app.models import Accepted, FileInput, Rejected, ValidationOutcome

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5 MiB
ACCEPTED_IMAGE_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})

INVALID_URL_MESSAGE = "Invalid URL format."
EMPTY_FILE_MESSAGE = "File is empty."
FILE_TOO_LARGE_MESSAGE = "Max file size is 5MB."
UNSUPPORTED_TYPE_MESSAGE = "Only .jpg, .jpeg, .png and .webp formats are supported."

_http_url = TypeAdapter(HttpUrl)


def validate_url(raw: str | None) -> ValidationOutcome[str]:
    """Accept *raw* only if it is an absolute http(s) URL.

    The accepted value is the stripped input as submitted, not pydantic's
    normalised form, so the original reference is echoed back unchanged.
    """

    candidate = (raw or "").strip()
    if not candidate:
        return Rejected(reasons=[INVALID_URL_MESSAGE])
    try:
        _http_url.validate_python(candidate)
    except ValidationError:
        logger.debug("Rejected URL %.100s", candidate)
        return Rejected(reasons=[INVALID_URL_MESSAGE])
    return Accepted[str](value=candidate)


def validate_file(file_input: FileInput) -> ValidationOutcome[FileInput]:
    """Check size and declared type; every failing rule adds a reason."""

    reasons: list[str] = []
    if file_input.size <= 0:
        reasons.append(EMPTY_FILE_MESSAGE)
    if file_input.size > MAX_FILE_SIZE:
        reasons.append(FILE_TOO_LARGE_MESSAGE)
    if (file_input.content_type or "").lower() not in ACCEPTED_IMAGE_TYPES:
        reasons.append(UNSUPPORTED_TYPE_MESSAGE)

    if reasons:
        logger.debug("Rejected upload %s: %s", file_input.display_name, reasons)
        return Rejected(reasons=reasons)
    return Accepted[FileInput](value=file_input)
