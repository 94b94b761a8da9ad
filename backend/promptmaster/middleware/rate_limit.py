"""
PromptMaster Backend - Rate Limiting Middleware
===============================================

What:  Per-IP sliding window rate limiter with two buckets.
How:   Every request counts against the general bucket
       (RATE_LIMIT_REQUESTS per RATE_LIMIT_WINDOW). Requests that reach the
       LLM also count against the AI bucket (AI_RATE_LIMIT_REQUESTS per the
       same window), which protects the Gemini quota.
Who:   Outermost middleware; rejects abuse before any other processing.

Algorithm: Sliding Window Log
    1. Each (bucket, IP) keeps a list of request timestamps
    2. Timestamps older than the window are dropped on every request
    3. If the remaining count reaches the limit → 429 with Retry-After
    4. Otherwise the current timestamp is recorded and the request passes

State lives in process memory, so limits are per worker process.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from promptmaster.config import settings
from promptmaster.exceptions import RateLimitExceededError

logger = logging.getLogger(__name__)

# (method, path) pairs that call the generative model
AI_ENDPOINTS = {
    ("POST", "/api/prompts"),
    ("POST", "/api/prompts/improve"),
    ("POST", "/api/prompts/voice"),
}


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Excluded paths: /health and the API docs are always reachable.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(
        self,
        app,
        requests: Optional[int] = None,
        ai_requests: Optional[int] = None,
        window: Optional[int] = None,
    ):
        super().__init__(app)
        self.limit = requests or settings.rate_limit_requests
        self.ai_limit = ai_requests or settings.ai_rate_limit_requests
        self.window = window or settings.rate_limit_window
        self._requests: Dict[Tuple[str, str], List[float]] = defaultdict(list)
        self._seen = 0

    @staticmethod
    def _is_ai_request(request: Request) -> bool:
        path = request.url.path.rstrip("/") or "/"
        return (request.method, path) in AI_ENDPOINTS

    def _check(self, bucket: str, client_ip: str, limit: int, now: float) -> None:
        """
        Raises:
            RateLimitExceededError: the bucket is full for this IP
        """
        key = (bucket, client_ip)
        window_start = now - self.window
        self._requests[key] = [ts for ts in self._requests[key] if ts > window_start]

        if len(self._requests[key]) >= limit:
            oldest = self._requests[key][0]
            retry_after = int(oldest + self.window - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s (%s bucket): %d requests in %ds window",
                client_ip,
                bucket,
                len(self._requests[key]),
                self.window,
            )
            raise RateLimitExceededError(retry_after=retry_after, context={"bucket": bucket})

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        now = time.time()
        ai_request = self._is_ai_request(request)

        try:
            self._check("general", client_ip, self.limit, now)
            if ai_request:
                self._check("ai", client_ip, self.ai_limit, now)
        except RateLimitExceededError as e:
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": e.message,
                    "details": e.context,
                },
                headers={"Retry-After": str(e.retry_after)},
            )

        # Recorded only once both buckets admit the request
        self._requests[("general", client_ip)].append(now)
        if ai_request:
            self._requests[("ai", client_ip)].append(now)

        self._seen += 1
        if self._seen % 1000 == 0:
            self._cleanup_inactive(now - self.window)

        return await call_next(request)

    def _cleanup_inactive(self, window_start: float) -> None:
        """Drops (bucket, IP) entries with no request inside the current window."""
        inactive = [
            key for key, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for key in inactive:
            del self._requests[key]

        if inactive:
            logger.debug("Cleaned up %d inactive rate limit entries", len(inactive))
