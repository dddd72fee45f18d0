from __future__ import annotations

from functools import lru_cache

from app.config import get_settings

from .base import BackgroundRemover
from .gemini_provider import GeminiBackgroundRemover

_PROVIDERS: dict[str, type[BackgroundRemover]] = {
    "gemini": GeminiBackgroundRemover,
}


@lru_cache()
def get_remover() -> BackgroundRemover:
    settings = get_settings()
    provider_key = settings.ai_provider.lower()
    if provider_key not in _PROVIDERS:
        raise ValueError(f"Unsupported AI provider: {provider_key}")
    return _PROVIDERS[provider_key](settings)
