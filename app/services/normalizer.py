"""Conversion between raw image bytes and inline data-URI image references.

Data URIs have the form::

    data:<mime-type>;base64,<payload>

Only the MIME types accepted for upload are allowed, and the decoded payload
may not exceed the upload size ceiling.
"""
from __future__ import annotations

import base64
import binascii
import io
import logging
import re

from PIL import Image, UnidentifiedImageError

from app.models import FileInput
from app.services.validation import ACCEPTED_IMAGE_TYPES, MAX_FILE_SIZE

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)

UPLOAD_READ_ERROR_MESSAGE = (
    "Failed to read the uploaded file. It might be corrupted or too large for buffer conversion."
)


class UploadReadError(Exception):
    """Raised when an uploaded file cannot be fully consumed."""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"Could not read upload {filename!r}: {reason}")
        self.filename = filename
        self.reason = reason


class InvalidImageReference(ValueError):
    """Raised when a data URI is malformed or violates the type/size limits."""


def is_data_uri(ref: str) -> bool:
    return ref.startswith("data:")


def encode_data_uri(data: bytes, mime_type: str) -> str:
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def decode_data_uri(ref: str, *, enforce_limits: bool = True) -> tuple[str, bytes]:
    """Split a data URI into ``(mime_type, raw_bytes)``.

    Parameters
    ----------
    ref : str
        The data URI.
    enforce_limits : bool, optional
        If *True* (default) the MIME type must be an accepted upload type and
        the payload must fit the upload size ceiling.
    """

    match = _DATA_URI_RE.match(ref)
    if match is None:
        raise InvalidImageReference("Not a base64 data URI")
    mime_type = match.group("mime").lower()
    if enforce_limits and mime_type not in ACCEPTED_IMAGE_TYPES:
        raise InvalidImageReference(f"Unsupported image type: {mime_type}")
    try:
        data = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageReference("Corrupt base64 payload") from exc
    if enforce_limits and len(data) > MAX_FILE_SIZE:
        raise InvalidImageReference("Image exceeds 5 MB size limit.")
    return mime_type, data


async def read_as_data_uri(file_input: FileInput) -> str:
    """Read the whole upload and return it as a data URI.

    Raises
    ------
    UploadReadError
        If the stream fails, yields a different number of bytes than declared,
        or the bytes do not decode as an image.
    """

    try:
        data = await file_input.read()
    except Exception as exc:
        raise UploadReadError(file_input.display_name, str(exc) or type(exc).__name__) from exc

    if not isinstance(data, (bytes, bytearray)):
        raise UploadReadError(file_input.display_name, f"unexpected payload type {type(data).__name__}")
    if len(data) != file_input.size:
        raise UploadReadError(
            file_input.display_name,
            f"read {len(data)} bytes, expected {file_input.size}",
        )

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise UploadReadError(file_input.display_name, f"not a decodable image ({exc})") from exc

    logger.debug("Read %d bytes from %s", len(data), file_input.display_name)
    return encode_data_uri(bytes(data), (file_input.content_type or "").lower())
