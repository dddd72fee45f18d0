from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import check_credentials, get_settings
from app.handlers import process_handler

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Raises MissingCredentialsError when REQUIRE_API_KEY is set and no key exists.
    app.state.credentials = check_credentials(settings)
    logger.info("Starting background remover (%s, model=%s)", settings.environment, settings.gemini_model)
    yield


app = FastAPI(title="Background Remover API", lifespan=lifespan)

app.include_router(process_handler.router)


@app.get("/healthz")
async def healthz():
    diagnostic = getattr(app.state, "credentials", None)
    return {
        "status": "ok",
        "credentials_configured": bool(diagnostic and diagnostic.configured),
    }
