"""Form endpoints for background removal and similar-image suggestions."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.models import FileInput, ProcessingResult, SuggestionResult, UrlInput
from app.services.ai import BackgroundRemover, get_remover
from app.services.pipeline import MAX_SUGGESTIONS, process_submission, suggest_similar_images

router = APIRouter()
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def file_input_from_upload(upload: UploadFile) -> FileInput:
    size = upload.size
    if size is None:
        upload.file.seek(0, 2)
        size = upload.file.tell()
        upload.file.seek(0)
    return FileInput(
        filename=upload.filename,
        content_type=upload.content_type,
        size=size,
        read=upload.read,
    )


# ---------------------------------------------------------------------------
# Background removal
# ---------------------------------------------------------------------------


@router.post("/process/url", response_model=ProcessingResult)
async def process_url(
    image_url: str = Form("", alias="imageUrl"),
    remover: BackgroundRemover = Depends(get_remover),
):
    return await process_submission(UrlInput(url=image_url), remover)


@router.post("/process/upload", response_model=ProcessingResult)
async def process_upload(
    image_file: UploadFile = File(..., alias="imageFile"),
    remover: BackgroundRemover = Depends(get_remover),
):
    return await process_submission(file_input_from_upload(image_file), remover)


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------


@router.post("/suggestions/url", response_model=SuggestionResult)
async def suggestions_url(
    image_url: str = Form("", alias="imageUrl"),
    count: int = Form(3, ge=1, le=MAX_SUGGESTIONS),
    remover: BackgroundRemover = Depends(get_remover),
):
    return await suggest_similar_images(UrlInput(url=image_url), remover, count=count)


@router.post("/suggestions/upload", response_model=SuggestionResult)
async def suggestions_upload(
    image_file: UploadFile = File(..., alias="imageFile"),
    count: int = Form(3, ge=1, le=MAX_SUGGESTIONS),
    remover: BackgroundRemover = Depends(get_remover),
):
    return await suggest_similar_images(file_input_from_upload(image_file), remover, count=count)
