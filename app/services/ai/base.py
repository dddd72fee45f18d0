from __future__ import annotations

from abc import ABC, abstractmethod

REMOVE_BACKGROUND_INSTRUCTION = (
    "Your task is to segment the main subject from this image and make the background "
    "transparent. Ensure the output is only the processed image of the subject with a "
    "transparent background. The output image should be in a format that supports "
    "transparency, like PNG."
)

SIMILAR_IMAGE_INSTRUCTION = "Generate an image similar to this one."


class NoImageReturnedError(Exception):
    """Raised when the model answers without an image."""

    def __init__(self, diagnostic_text: str | None = None):
        self.diagnostic_text = diagnostic_text
        super().__init__(
            "AI model did not return an image. Diagnostic text from AI: "
            f"\"{diagnostic_text or 'No text response.'}\""
        )


class BackgroundRemover(ABC):
    """Abstract interface for an image-editing model provider.

    Each call is single-shot: implementations do not retry and the pipeline
    does not impose a timeout on them.
    """

    name: str = "abstract"

    @abstractmethod
    async def remove_background(self, image_ref: str) -> str | None:
        """Return the subject on a transparent background.

        Parameters
        ----------
        image_ref : str
            An http(s) URL or a ``data:<mime>;base64,`` URI.

        Returns
        -------
        str | None
            The processed image as a data URI.
        """

    @abstractmethod
    async def suggest_similar(self, image_ref: str, count: int) -> list[str]:
        """Generate up to *count* images similar to *image_ref*, as data URIs."""
