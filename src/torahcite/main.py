"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

# Phase 1: Singleton logging: MUST be before any torahcite imports
# (they transitively import litellm which reads LITELLM_LOG at import time)
from torahcite.logging_config import setup_logging

setup_logging()

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from torahcite import __version__  # noqa: E402
from torahcite.api.middleware.auth import ApiKeyMiddleware  # noqa: E402
from torahcite.api.routes import health, suggestions  # noqa: E402
from torahcite.config import Settings  # noqa: E402
from torahcite.constants import API_KEY_HEADER  # noqa: E402
from torahcite.logging_config import (  # noqa: E402
    cleanup_third_party_handlers,
)
from torahcite.services.pipeline import create_pipeline  # noqa: E402

# Phase 2: Now that all imports (including litellm) are done,
# clear litellm's duplicate handlers.
cleanup_third_party_handlers()

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = _settings

    # One gateway (and cache) for the whole process
    pipeline = create_pipeline(settings)

    app.state.settings = settings
    app.state.pipeline = pipeline

    if not settings.api_key:
        _logger.warning(
            "event=no_api_key action=all_endpoints_public"
        )
    if settings.candidate_generator_enabled and not (
        settings.openai_api_key or settings.anthropic_api_key
    ):
        _logger.info(
            "event=generator_without_credentials action=pattern_only"
        )

    yield

    await pipeline.aclose()


app = FastAPI(
    title="torahcite",
    description=(
        "Citation detection and source suggestions"
        " for Torah and Talmud writing"
    ),
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# Middleware stack (Starlette LIFO: last added = outermost = runs first)
#
# CORS must be outermost so OPTIONS preflight is answered before
# ApiKeyMiddleware rejects for missing X-API-Key.
_settings = Settings()
_cors_origins = [
    o.strip()
    for o in _settings.cors_origins.split(",")
    if o.strip()
]

app.add_middleware(ApiKeyMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", API_KEY_HEADER],
    allow_credentials=False,
)

app.include_router(health.router)
app.include_router(suggestions.router)
