from __future__ import annotations

import io

import pytest
from PIL import Image

from app.services.ai import BackgroundRemover

TRANSPARENT_PNG_URI = "data:image/png;base64,iVBORw0KGgo="


class FakeRemover(BackgroundRemover):
    """Records calls and replays a scripted result or exception."""

    name = "fake"

    def __init__(self, result: str | None = TRANSPARENT_PNG_URI, error: object | None = None):
        self.result = result
        self.error = error
        self.calls: list[str] = []

    async def remove_background(self, image_ref: str) -> str | None:
        self.calls.append(image_ref)
        if self.error is not None:
            raise self.error
        return self.result

    async def suggest_similar(self, image_ref: str, count: int) -> list[str]:
        self.calls.append(image_ref)
        if self.error is not None:
            raise self.error
        return [self.result] * count if self.result else []


def make_png(size: tuple[int, int] = (4, 4)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", size, (255, 0, 0, 255)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def fake_remover() -> FakeRemover:
    return FakeRemover()
