"""Optional shared-key protection for the suggestion endpoints."""

from __future__ import annotations

import hmac
import logging

from fastapi import Request, Response
from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)
from starlette.responses import JSONResponse

from torahcite.api.schemas import APIResponse
from torahcite.config import Settings
from torahcite.constants import API_KEY_HEADER

logger = logging.getLogger(__name__)


def is_exempt(path: str, exempt_paths: list[str]) -> bool:
    """True when ``path`` is an exempt path or nested below one.

    ``/api/health/deep`` is covered by ``/api/health``;
    ``/api/healthz`` is not.
    """
    return any(
        path == p or path.startswith(p.rstrip("/") + "/")
        for p in exempt_paths
    )


def _reject(path: str, reason: str, message: str) -> JSONResponse:
    logger.warning("event=auth_rejected path=%s reason=%s", path, reason)
    body = APIResponse(
        success=False,
        error=message,
        metadata={"header": API_KEY_HEADER},
    )
    return JSONResponse(
        status_code=401,
        content=body.model_dump(),
        headers={"WWW-Authenticate": API_KEY_HEADER},
    )


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Require ``X-API-Key`` when ``Settings.api_key`` is set.

    Key and exempt paths are read from the live ``app.state.settings`` on
    every request, so a reconfigured app needs no new middleware. CORS
    preflights are answered by the outer CORS middleware first.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        settings: Settings = request.app.state.settings
        path = request.url.path
        if not settings.api_key or is_exempt(
            path, settings.api_key_exempt_paths
        ):
            return await call_next(request)

        provided = request.headers.get(API_KEY_HEADER)
        if not provided:
            return _reject(
                path, "missing", f"Missing {API_KEY_HEADER} header"
            )
        if not hmac.compare_digest(
            provided.encode(), settings.api_key.encode()
        ):
            return _reject(path, "mismatch", "Invalid API key")

        return await call_next(request)
