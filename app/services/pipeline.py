"""Submission pipeline: validate, normalize, call the model, build the result.

Every outcome, including failures, is returned as a result record; nothing
raised by the model call escapes to the caller.
"""
from __future__ import annotations

import logging
import uuid

from pydantic import BaseModel

from app.config import get_settings
from app.models import (
    FileInput,
    ImageInput,
    ProcessingResult,
    Rejected,
    SuggestionResult,
    UrlInput,
)
from app.services.ai import BackgroundRemover, NoImageReturnedError
from app.services.error_classifier import classify_error
from app.services.normalizer import UPLOAD_READ_ERROR_MESSAGE, UploadReadError, read_as_data_uri
from app.services.validation import validate_file, validate_url

logger = logging.getLogger(__name__)

NO_IMAGE_MESSAGE = (
    "AI processing did not return an image. The image might be unsuitable or the "
    "service encountered an issue."
)
MAX_SUGGESTIONS = 4


class _Prepared(BaseModel):
    """Image reference ready for the model, or the error that stopped it."""

    original_ref: str | None
    image_ref: str | None = None
    error: str | None = None


def new_correlation_id() -> str:
    return str(uuid.uuid4())


async def _prepare(submission: ImageInput, correlation_id: str) -> _Prepared:
    if isinstance(submission, UrlInput):
        outcome = validate_url(submission.url)
        if isinstance(outcome, Rejected):
            logger.info("[%s] URL rejected: %s", correlation_id, outcome.message)
            return _Prepared(original_ref=submission.url, error=outcome.message)
        return _Prepared(original_ref=outcome.value, image_ref=outcome.value)

    assert isinstance(submission, FileInput)
    outcome = validate_file(submission)
    if isinstance(outcome, Rejected):
        logger.info("[%s] Upload %s rejected: %s", correlation_id, submission.display_name, outcome.message)
        return _Prepared(original_ref=submission.display_name, error=outcome.message)
    try:
        data_uri = await read_as_data_uri(submission)
    except UploadReadError as exc:
        logger.error("[%s] Error converting file to data URI: %s", correlation_id, exc)
        return _Prepared(original_ref=submission.display_name, error=UPLOAD_READ_ERROR_MESSAGE)
    return _Prepared(original_ref=data_uri, image_ref=data_uri)


async def process_submission(
    submission: ImageInput,
    remover: BackgroundRemover,
    *,
    correlation_id: str | None = None,
) -> ProcessingResult:
    """Run one background-removal submission end to end."""

    correlation_id = correlation_id or new_correlation_id()
    prepared = await _prepare(submission, correlation_id)
    if prepared.error is not None:
        return ProcessingResult(
            correlation_id=correlation_id,
            original_image_ref=prepared.original_ref,
            error_message=prepared.error,
        )

    image_ref = prepared.image_ref
    logger.info("[%s] Processing %s: %.100s", correlation_id, submission.kind, image_ref)
    try:
        processed = await remover.remove_background(image_ref)
    except NoImageReturnedError as exc:
        logger.warning("[%s] %s", correlation_id, exc)
        processed = None
    except Exception as exc:
        logger.exception("[%s] Error processing image %.100s", correlation_id, image_ref)
        return ProcessingResult(
            correlation_id=correlation_id,
            original_image_ref=image_ref,
            error_message=classify_error(exc, max_length=get_settings().error_message_max_length),
        )

    if not processed:
        logger.warning("[%s] AI processing did not return an image", correlation_id)
        return ProcessingResult(
            correlation_id=correlation_id,
            original_image_ref=image_ref,
            error_message=NO_IMAGE_MESSAGE,
        )

    logger.info("[%s] Success. Processed URI: %.100s", correlation_id, processed)
    return ProcessingResult(
        correlation_id=correlation_id,
        original_image_ref=image_ref,
        processed_image_ref=processed,
    )


async def suggest_similar_images(
    submission: ImageInput,
    remover: BackgroundRemover,
    *,
    count: int = 3,
    correlation_id: str | None = None,
) -> SuggestionResult:
    """Generate images similar to the submitted one."""

    correlation_id = correlation_id or new_correlation_id()
    count = max(1, min(count, MAX_SUGGESTIONS))
    prepared = await _prepare(submission, correlation_id)
    if prepared.error is not None:
        return SuggestionResult(
            correlation_id=correlation_id,
            original_image_ref=prepared.original_ref,
            error_message=prepared.error,
        )

    try:
        suggestions = await remover.suggest_similar(prepared.image_ref, count)
    except NoImageReturnedError as exc:
        logger.warning("[%s] %s", correlation_id, exc)
        suggestions = []
    except Exception as exc:
        logger.exception("[%s] Error generating suggestions", correlation_id)
        return SuggestionResult(
            correlation_id=correlation_id,
            original_image_ref=prepared.image_ref,
            error_message=classify_error(exc, max_length=get_settings().error_message_max_length),
        )

    suggestions = [ref for ref in suggestions if ref]
    if not suggestions:
        return SuggestionResult(
            correlation_id=correlation_id,
            original_image_ref=prepared.image_ref,
            error_message=NO_IMAGE_MESSAGE,
        )
    logger.info("[%s] Generated %d suggestions", correlation_id, len(suggestions))
    return SuggestionResult(
        correlation_id=correlation_id,
        original_image_ref=prepared.image_ref,
        suggested_image_refs=suggestions,
    )
