from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class ProcessingResult(BaseModel):
    """Outcome of one background-removal submission.

    Once the pipeline has run exactly one of ``processed_image_ref`` and
    ``error_message`` is set. Both are empty only for a result that was never
    submitted (see :meth:`initial`).
    """

    model_config = ConfigDict(frozen=True)

    correlation_id: str | None = None
    original_image_ref: str | None = None
    processed_image_ref: str | None = None
    error_message: str | None = None

    @model_validator(mode="after")
    def _check_outcome(self) -> "ProcessingResult":
        if self.processed_image_ref is not None and self.error_message is not None:
            raise ValueError("processed_image_ref and error_message are mutually exclusive")
        if self.correlation_id is not None and self.processed_image_ref is None and self.error_message is None:
            raise ValueError("a submitted result needs either processed_image_ref or error_message")
        return self

    @classmethod
    def initial(cls) -> "ProcessingResult":
        return cls()

    @property
    def succeeded(self) -> bool:
        return self.processed_image_ref is not None


class SuggestionResult(BaseModel):
    """Outcome of a similar-image suggestion request."""

    model_config = ConfigDict(frozen=True)

    correlation_id: str
    original_image_ref: str | None = None
    suggested_image_refs: list[str] = []
    error_message: str | None = None

    @model_validator(mode="after")
    def _check_outcome(self) -> "SuggestionResult":
        if self.suggested_image_refs and self.error_message is not None:
            raise ValueError("suggested_image_refs and error_message are mutually exclusive")
        return self
