# =============================================================================
# Request Logging Middleware — One Log Line Per Request
# =============================================================================
#
# Emits `METHOD /path -> status (N ms, client=ip)` for every API call.
# Error responses produced by the exception handlers in app/main.py pass
# through here as ordinary responses, so 400/404/500 are logged with the
# same line as successes. 5xx lines are logged at WARNING.
#
# Health checks and the interactive docs are not logged.
#
# Switched off with REQUEST_LOGGING_ENABLED=false.
# =============================================================================

from __future__ import annotations

import logging
import time

from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

logger = logging.getLogger(__name__)

_QUIET_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


def _should_log(request: Request) -> bool:
    return settings.request_logging_enabled and request.url.path not in _QUIET_PATHS


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request outside `_QUIET_PATHS` at INFO, 5xx at WARNING."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if not _should_log(request):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000)

        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "%s %s -> %d (%d ms, client=%s)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request.client.host if request.client else "-",
        )
        return response
