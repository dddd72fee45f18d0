from __future__ import annotations

import asyncio
import base64

import pytest

from app.models import FileInput
from app.services.normalizer import (
    InvalidImageReference,
    UploadReadError,
    decode_data_uri,
    encode_data_uri,
    is_data_uri,
    read_as_data_uri,
)
from app.services.validation import MAX_FILE_SIZE


def test_read_as_data_uri_prefixes_declared_mime(png_bytes):
    upload = FileInput.from_bytes(png_bytes, content_type="image/png", filename="red.png")
    ref = asyncio.run(read_as_data_uri(upload))
    assert ref.startswith("data:image/png;base64,")
    assert base64.b64decode(ref.split(",", 1)[1]) == png_bytes


def test_encoded_upload_decodes_to_original_bytes(png_bytes):
    upload = FileInput.from_bytes(png_bytes, content_type="image/png")
    mime, data = decode_data_uri(asyncio.run(read_as_data_uri(upload)))
    assert mime == "image/png"
    assert data == png_bytes


@pytest.mark.parametrize("payload", [b"\x00", bytes(range(256)), b"\xff" * 1000])
def test_codec_preserves_arbitrary_bytes(payload):
    assert decode_data_uri(encode_data_uri(payload, "image/webp")) == ("image/webp", payload)


def test_stream_failure_raises_read_error():
    async def _broken() -> bytes:
        raise OSError("connection reset")

    upload = FileInput(filename="cat.png", content_type="image/png", size=10, read=_broken)
    with pytest.raises(UploadReadError) as excinfo:
        asyncio.run(read_as_data_uri(upload))
    assert excinfo.value.filename == "cat.png"
    assert "connection reset" in excinfo.value.reason


def test_truncated_stream_raises_read_error(png_bytes):
    async def _short() -> bytes:
        return png_bytes[:-5]

    upload = FileInput(filename="cat.png", content_type="image/png", size=len(png_bytes), read=_short)
    with pytest.raises(UploadReadError, match="expected"):
        asyncio.run(read_as_data_uri(upload))


def test_corrupt_image_raises_read_error():
    upload = FileInput.from_bytes(b"definitely not an image", content_type="image/png", filename="x.png")
    with pytest.raises(UploadReadError, match="not a decodable image"):
        asyncio.run(read_as_data_uri(upload))


def test_is_data_uri():
    assert is_data_uri("data:image/png;base64,AAAA")
    assert not is_data_uri("https://example.com/a.png")


@pytest.mark.parametrize(
    "ref",
    [
        "https://example.com/a.png",
        "data:image/png,rawtext",
        "data:image/png;base64,***",
        "data:image/gif;base64,R0lGOD==",
    ],
)
def test_decode_rejects_invalid_references(ref):
    with pytest.raises(InvalidImageReference):
        decode_data_uri(ref)


def test_decode_enforces_size_ceiling():
    ref = encode_data_uri(b"\0" * (MAX_FILE_SIZE + 1), "image/png")
    with pytest.raises(InvalidImageReference, match="5 MB"):
        decode_data_uri(ref)
    mime, data = decode_data_uri(ref, enforce_limits=False)
    assert len(data) == MAX_FILE_SIZE + 1
