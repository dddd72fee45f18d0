from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()

logger = logging.getLogger(__name__)

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "GOOGLE_GENAI_API_KEY")


class MissingCredentialsError(RuntimeError):
    """Raised at startup when a credential is required but not configured."""


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True)

    # General
    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    # Google Gemini
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(*API_KEY_ENV_VARS),
        description="API key for the Gemini API; first of GEMINI_API_KEY, GOOGLE_API_KEY, GOOGLE_GENAI_API_KEY.",
    )
    gemini_model: str = Field("gemini-2.0-flash-exp", validation_alias="GEMINI_MODEL")

    # Provider selection
    ai_provider: str = Field("gemini", validation_alias="AI_PROVIDER")
    require_api_key: bool = Field(
        False,
        validation_alias="REQUIRE_API_KEY",
        description="If true, startup fails when no API key is configured instead of only warning.",
    )

    # Image handling
    image_fetch_timeout: float = Field(30.0, validation_alias="IMAGE_FETCH_TIMEOUT", description="Seconds allowed to download an image URL.")
    error_message_max_length: int = Field(500, validation_alias="ERROR_MESSAGE_MAX_LENGTH", ge=40)


class CredentialDiagnostic(BaseModel):
    """Outcome of the one-time startup credential check."""

    configured: bool
    environment: str
    checked_env_vars: tuple[str, ...] = API_KEY_ENV_VARS
    message: str


def check_credentials(settings: Settings) -> CredentialDiagnostic:
    """Report whether an API key is configured.

    Raises
    ------
    MissingCredentialsError
        If no key is set and ``settings.require_api_key`` is enabled.
    """

    if settings.gemini_api_key:
        return CredentialDiagnostic(
            configured=True,
            environment=settings.environment,
            message="Gemini API key configured.",
        )

    diagnostic = CredentialDiagnostic(
        configured=False,
        environment=settings.environment,
        message=(
            f"None of {', '.join(API_KEY_ENV_VARS)} is set. Requests to the AI "
            "service will fail until a key is configured and the server is restarted."
        ),
    )
    if settings.require_api_key:
        raise MissingCredentialsError(diagnostic.message)
    logger.warning("Credential check failed: %s", diagnostic.message, extra={"diagnostic": diagnostic.model_dump()})
    return diagnostic


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
