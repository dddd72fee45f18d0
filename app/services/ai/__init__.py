from __future__ import annotations

from .base import BackgroundRemover, NoImageReturnedError
from .registry import get_remover

__all__ = [
    "BackgroundRemover",
    "NoImageReturnedError",
    "get_remover",
]
