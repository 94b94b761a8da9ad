"""
PromptMaster Backend - Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the different failure scenarios.
How:   Each exception carries a user-safe message and an optional context dict.
       Global exception handlers (registered in main.py) map them to HTTP
       status codes and a consistent JSON error body.
Who:   Raised by services and middleware; caught by the global handlers.

Exception Hierarchy:
    PromptMasterError (base)
    ├── ValidationError            → 400 Bad Request
    ├── AuthenticationError        → 401 Unauthorized (no caller identity)
    ├── NotFoundError              → 404 Not Found
    ├── ConfigurationError         → 500 Internal Server Error (missing credential)
    ├── UpstreamGenerationError    → 502 Bad Gateway (empty/failed completion)
    ├── UpstreamRateLimitError     → 429 Too Many Requests (provider quota)
    ├── TranscriptionError         → 422 Unprocessable Entity (empty transcript)
    ├── TranslationDegradedError   → never surfaced; absorbed by the fallback chain
    ├── DatabaseError              → 500 Internal Server Error
    └── RateLimitExceededError     → 429 Too Many Requests (per-IP limiter)

Only generation-stage failures reach the user. Translation failures are
resolved by the fallback chain in services/translation_service.py.
"""

from typing import Any, Dict, Optional


class PromptMasterError(Exception):
    """
    Base exception for all PromptMaster application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where handlers choose to)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PromptMasterError):
    """
    Raised when client input fails a business rule.

    When:    Unsupported audio type, empty or oversized audio upload.
    HTTP:    400 Bad Request

    Schema-level problems (missing promptText, unknown language tag) are caught
    earlier by FastAPI and answered with its default 422.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(PromptMasterError):
    """
    Raised when a request that reads or writes prompt history carries no
    caller identity (missing or malformed X-User-ID header).

    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PromptMasterError):
    """Raised when a prompt or template does not exist (HTTP 404)."""

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConfigurationError(PromptMasterError):
    """
    Raised when a required credential is missing at call time.

    When:    GEMINI_API_KEY is empty and a generation call is attempted.
    HTTP:    500 Internal Server Error. Not retried: the operator has to fix it.
    """

    def __init__(
        self,
        message: str = "The AI service is not configured on the server",
        setting: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if setting:
            ctx["setting"] = setting
        super().__init__(message=message, context=ctx)
        self.setting = setting


class UpstreamGenerationError(PromptMasterError):
    """
    Raised when the generative model returns nothing usable or the call fails.

    HTTP:    502 Bad Gateway. The request fails as a whole; there is no retry.
    """

    def __init__(
        self,
        message: str = "Failed to generate AI response",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamRateLimitError(PromptMasterError):
    """
    Raised when the model provider rejects the call for quota reasons.

    HTTP:    429 Too Many Requests. The client should retry later.
    """

    def __init__(
        self,
        message: str = "AI provider rate limit exceeded. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TranscriptionError(PromptMasterError):
    """
    Raised when a voice prompt transcribes to empty text.

    HTTP:    422 Unprocessable Entity. The pipeline stops before generation.
    """

    def __init__(
        self,
        message: str = "Failed to transcribe audio. Please record again and speak clearly.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TranslationDegradedError(PromptMasterError):
    """
    Raised by a single translation strategy when it cannot produce a result.

    Never reaches a handler: TranslationService catches it, logs a warning
    and moves on to the next strategy (ultimately returning the original text).
    """

    def __init__(
        self,
        message: str = "Translation provider unavailable",
        strategy: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if strategy:
            ctx["strategy"] = strategy
        super().__init__(message=message, context=ctx)
        self.strategy = strategy


class DatabaseError(PromptMasterError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error. The message returned to the client is
    always generic; SQL details are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(PromptMasterError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests, with a Retry-After header.
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
