"""
PromptMaster Backend - Request Logging Middleware
=================================================

What:  One access log line per request with method, path, status, duration
       and request ID.
How:   Measures wall time around call_next() and logs on the
       "promptmaster.access" logger; the level follows the status class
       (5xx ERROR, 4xx WARNING, otherwise INFO). Structured fields go in
       `extra` for log shippers that read record attributes.
Who:   Runs after RequestIDMiddleware, so the request ID is already set.

Request bodies are never logged: prompts and audio are user content.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from promptmaster.middleware.request_id import get_request_id

logger = logging.getLogger("promptmaster.access")

QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Typical durations:
        GET /health, GET /api/languages:  1-5ms
        GET /api/prompts:                  10-50ms (database query)
        POST /api/prompts/improve:         2-8s (Gemini call plus translations)
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        # Health probes run every few seconds
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        rid = get_request_id()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
