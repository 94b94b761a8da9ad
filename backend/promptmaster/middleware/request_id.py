"""
PromptMaster Backend - Request ID Middleware
============================================

What:  Assigns a correlation ID to each request and echoes it back.
How:   Reuses the client's X-Request-ID header when present, otherwise
       generates a short UUID. The ID is stored in a ContextVar (for loggers,
       the pipeline and exception handlers) and on request.state.
Who:   Applied to every request, right after the rate limiter.

The mobile client logs X-Request-ID next to failed calls, so a support report
can be matched with the server-side pipeline stage logs.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

MAX_CLIENT_ID_LENGTH = 64


def get_request_id() -> str:
    """Current request ID, or "-" outside a request (startup, tests, scripts)."""
    return request_id_var.get() or "-"


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        client_id = (request.headers.get("X-Request-ID") or "").strip()
        rid = client_id[:MAX_CLIENT_ID_LENGTH] or str(uuid.uuid4())[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
