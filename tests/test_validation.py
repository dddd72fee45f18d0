from __future__ import annotations

import pytest

from app.models import Accepted, FileInput, Rejected
from app.services.validation import (
    EMPTY_FILE_MESSAGE,
    FILE_TOO_LARGE_MESSAGE,
    INVALID_URL_MESSAGE,
    MAX_FILE_SIZE,
    UNSUPPORTED_TYPE_MESSAGE,
    validate_file,
    validate_url,
)


def _file(size: int, content_type: str | None = "image/png") -> FileInput:
    async def _read() -> bytes:  # pragma: no cover - never read during validation
        return b"\0" * size

    return FileInput(filename="photo.png", content_type=content_type, size=size, read=_read)


@pytest.mark.parametrize(
    "url",
    ["https://example.com/cat.jpg", "http://localhost:8000/img.png", "  https://example.com/a.webp  "],
)
def test_accepts_absolute_http_urls(url):
    outcome = validate_url(url)
    assert isinstance(outcome, Accepted)
    assert outcome.value == url.strip()


@pytest.mark.parametrize(
    "url",
    ["", "   ", None, "example.com/cat.jpg", "/images/cat.jpg", "not a url", "ftp://example.com/cat.jpg", "https://"],
)
def test_rejects_malformed_urls(url):
    outcome = validate_url(url)
    assert isinstance(outcome, Rejected)
    assert outcome.reasons == [INVALID_URL_MESSAGE]
    assert outcome.message == "Invalid URL format."


def test_accepts_valid_file():
    outcome = validate_file(_file(1024))
    assert isinstance(outcome, Accepted)


@pytest.mark.parametrize("content_type", ["image/jpeg", "image/jpg", "image/png", "image/webp", "IMAGE/PNG"])
def test_accepts_allowed_types(content_type):
    assert isinstance(validate_file(_file(10, content_type)), Accepted)


def test_empty_file_rejected():
    outcome = validate_file(_file(0))
    assert isinstance(outcome, Rejected)
    assert outcome.reasons == [EMPTY_FILE_MESSAGE]


def test_file_at_limit_accepted():
    assert isinstance(validate_file(_file(MAX_FILE_SIZE)), Accepted)


@pytest.mark.parametrize("content_type", ["image/png", "image/gif", None])
def test_oversized_file_rejected_regardless_of_type(content_type):
    outcome = validate_file(_file(MAX_FILE_SIZE + 1, content_type))
    assert isinstance(outcome, Rejected)
    assert FILE_TOO_LARGE_MESSAGE in outcome.reasons


@pytest.mark.parametrize("content_type", ["image/gif", "application/pdf", "text/plain", "", None])
def test_unsupported_type_rejected(content_type):
    outcome = validate_file(_file(10, content_type))
    assert isinstance(outcome, Rejected)
    assert outcome.reasons == [UNSUPPORTED_TYPE_MESSAGE]


def test_all_failing_rules_are_reported():
    outcome = validate_file(_file(0, "image/gif"))
    assert isinstance(outcome, Rejected)
    assert outcome.reasons == [EMPTY_FILE_MESSAGE, UNSUPPORTED_TYPE_MESSAGE]
    assert outcome.message == f"{EMPTY_FILE_MESSAGE}, {UNSUPPORTED_TYPE_MESSAGE}"
