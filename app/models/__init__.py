from .failure import Failure, OpaqueFailure, StringFailure, StructuredFailure
from .image_input import FileInput, ImageInput, UrlInput
from .result import ProcessingResult, SuggestionResult
from .validation import Accepted, Rejected, ValidationOutcome

__all__ = [
    "Accepted",
    "Failure",
    "FileInput",
    "ImageInput",
    "OpaqueFailure",
    "ProcessingResult",
    "Rejected",
    "StringFailure",
    "StructuredFailure",
    "SuggestionResult",
    "UrlInput",
    "ValidationOutcome",
]
