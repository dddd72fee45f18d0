"""Google Gemini implementation of :class:`BackgroundRemover`.

Image references are turned into inline image parts: data URIs are decoded
locally, http(s) URLs are downloaded first. The model is asked for both text
and image output; the first inline image in the answer is the result.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx
from google import genai
from google.genai import types

from app.config import Settings
from app.services.normalizer import decode_data_uri, encode_data_uri, is_data_uri

from .base import (
    REMOVE_BACKGROUND_INSTRUCTION,
    SIMILAR_IMAGE_INSTRUCTION,
    BackgroundRemover,
    NoImageReturnedError,
)

logger = logging.getLogger(__name__)

RESPONSE_MODALITIES = ["TEXT", "IMAGE"]


class ImageFetchError(Exception):
    """Raised when an image URL cannot be downloaded as an image."""

    def __init__(self, url: str, message: str):
        super().__init__(f"Could not fetch image from {url[:100]}: {message}")
        self.url = url


class GeminiBackgroundRemover(BackgroundRemover):
    name = "gemini"

    def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport
        self._client: genai.Client | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def remove_background(self, image_ref: str) -> str | None:
        image_part = await self._image_part(image_ref)
        logger.info("Requesting background removal from %s", self._settings.gemini_model)
        response = await self._generate(image_part, REMOVE_BACKGROUND_INSTRUCTION)
        data_uri, text = _extract_output(response)
        logger.info("Background removal - AI text response: %s", text)
        if data_uri is None:
            raise NoImageReturnedError(text)
        return data_uri

    async def suggest_similar(self, image_ref: str, count: int) -> list[str]:
        image_part = await self._image_part(image_ref)
        suggestions: list[str] = []
        last_text: str | None = None
        for index in range(count):
            response = await self._generate(image_part, SIMILAR_IMAGE_INSTRUCTION)
            data_uri, last_text = _extract_output(response)
            if data_uri is None:
                logger.warning("Suggestion %d/%d returned no image", index + 1, count)
                continue
            suggestions.append(data_uri)
        if not suggestions:
            raise NoImageReturnedError(last_text)
        return suggestions

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get_client(self) -> genai.Client:
        # Created on first use so a missing key surfaces as a request error.
        if self._client is None:
            self._client = genai.Client(api_key=self._settings.gemini_api_key)
        return self._client

    async def _generate(self, image_part: types.Part, instruction: str) -> Any:
        client = self._get_client()
        return await client.aio.models.generate_content(
            model=self._settings.gemini_model,
            contents=[image_part, instruction],
            config=types.GenerateContentConfig(response_modalities=RESPONSE_MODALITIES),
        )

    async def _image_part(self, image_ref: str) -> types.Part:
        if is_data_uri(image_ref):
            mime_type, data = decode_data_uri(image_ref)
        else:
            mime_type, data = await self._download(image_ref)
        return types.Part.from_bytes(data=data, mime_type=mime_type)

    async def _download(self, url: str) -> tuple[str, bytes]:
        logger.debug("GET image %.100s", url)
        async with httpx.AsyncClient(
            timeout=self._settings.image_fetch_timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            try:
                resp = await client.get(url)
            except httpx.HTTPError as exc:
                raise ImageFetchError(url, str(exc) or type(exc).__name__) from exc
        if resp.status_code >= 400:
            raise ImageFetchError(url, f"HTTP {resp.status_code}")
        content_type = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
        if not content_type.startswith("image/"):
            raise ImageFetchError(url, f"expected an image, got content type {content_type or 'unknown'!r}")
        return content_type, resp.content


def _extract_output(response: Any) -> tuple[str | None, str | None]:
    """Return ``(image_data_uri, text)`` from a generate_content response.

    A prompt blocked before any candidate is produced is raised as an error
    mentioning the block reason.
    """

    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = getattr(feedback, "block_reason", None)
        if block_reason:
            raise RuntimeError(f"Request blocked due to safety settings ({block_reason}).")
        return None, None

    candidate = candidates[0]
    content = getattr(candidate, "content", None)
    parts = getattr(content, "parts", None) or []

    image_uri: str | None = None
    texts: list[str] = []
    for part in parts:
        text = getattr(part, "text", None)
        if text:
            texts.append(text)
        inline_data = getattr(part, "inline_data", None)
        data = getattr(inline_data, "data", None) if inline_data is not None else None
        if image_uri is None and data:
            image_uri = encode_data_uri(data, inline_data.mime_type or "image/png")

    finish_reason = str(getattr(candidate, "finish_reason", "") or "")
    if image_uri is None and "SAFETY" in finish_reason.upper():
        raise RuntimeError(f"Response blocked due to safety settings ({finish_reason}).")

    return image_uri, " ".join(texts) or None
