from __future__ import annotations

from typing import Annotated, Awaitable, Callable, Literal, Union

from pydantic import BaseModel, Field


class UrlInput(BaseModel):
    """Image submitted by URL."""

    kind: Literal["url"] = "url"
    url: str = ""


class FileInput(BaseModel):
    """Image submitted as an uploaded file.

    ``read`` is awaited once by the normalizer to consume the whole payload;
    ``size`` and ``content_type`` are the values declared by the client.
    """

    kind: Literal["file"] = "file"
    filename: str | None = None
    content_type: str | None = None
    size: int = Field(..., ge=0)
    read: Callable[[], Awaitable[bytes]] = Field(..., exclude=True, repr=False)

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        *,
        content_type: str | None,
        filename: str | None = None,
    ) -> "FileInput":
        async def _read() -> bytes:
            return data

        return cls(filename=filename, content_type=content_type, size=len(data), read=_read)

    @property
    def display_name(self) -> str:
        return self.filename or "Uploaded file"


ImageInput = Annotated[Union[UrlInput, FileInput], Field(discriminator="kind")]
