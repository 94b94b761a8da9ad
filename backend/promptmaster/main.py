"""
PromptMaster Backend - FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers;
       lifespan() configures logging on startup and releases the translation
       HTTP pool and the database engine on shutdown.
Who:   uvicorn (uvicorn promptmaster.main:app), and the test client.

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                     FastAPI App                         │
    │                                                         │
    │  Middleware: RateLimit → RequestID → Logging → GZip →   │
    │              CORS                                       │
    │                                                         │
    │  Routes: /api/prompts/*  /api/templates/*               │
    │          /api/languages  /health                        │
    │                                                         │
    │  Exception Handlers:                                    │
    │    Validation→400  Auth→401  NotFound→404               │
    │    Transcription→422                                    │
    │    UpstreamRateLimit→429  UpstreamGeneration→502        │
    │    Configuration/Database/unexpected→500                │
    └─────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from promptmaster import __version__
from promptmaster.config import settings
from promptmaster.database import dispose_engine
from promptmaster.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DatabaseError,
    NotFoundError,
    PromptMasterError,
    TranscriptionError,
    UpstreamGenerationError,
    UpstreamRateLimitError,
    ValidationError,
)
from promptmaster.middleware.logging import RequestLoggingMiddleware
from promptmaster.middleware.rate_limit import RateLimitMiddleware
from promptmaster.middleware.request_id import RequestIDMiddleware, request_id_var
from promptmaster.routes import health, languages, prompts, templates
from promptmaster.services.translation_service import translation_service

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """Configures the root logger once, writing to stdout (Docker captures it)."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("PromptMaster Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # The server keeps running: history, templates and /health still work
        logger.error("Configuration error: %s", str(e))
        logger.error("AI endpoints will answer 500 until the configuration is fixed.")

    logger.info("Gemini model: %s", settings.gemini_model)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("PromptMaster Backend shutting down...")
    await translation_service.aclose()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    # request.state survives past the middleware that reset the ContextVar
    return getattr(request.state, "request_id", None) or request_id_var.get("")


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": _request_id(request),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Maps the application exceptions to HTTP responses.

    Handler hierarchy:
        ValidationError          → 400
        AuthenticationError      → 401
        NotFoundError            → 404
        TranscriptionError       → 422
        UpstreamRateLimitError   → 429 (Retry-After: 60)
        UpstreamGenerationError  → 502
        ConfigurationError       → 500
        DatabaseError            → 500 (generic message)
        PromptMasterError (base) → 500
        Exception (fallback)     → 500 (stack trace logged)

    Per-IP rate limiting answers 429 from RateLimitMiddleware itself.
    Internal details (SQL, stack traces, setting values) never reach the body.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        return _error_response(request, 400, "validation_error", exc.message, exc.context)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        logger.info("[%s] Unauthenticated request: %s", _request_id(request), exc.message)
        return _error_response(request, 401, "unauthorized", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(request, 404, "not_found", exc.message)

    @app.exception_handler(TranscriptionError)
    async def handle_transcription_error(request: Request, exc: TranscriptionError):
        logger.warning("[%s] Transcription failed: %s", _request_id(request), exc.context)
        return _error_response(request, 422, "transcription_failed", exc.message)

    @app.exception_handler(UpstreamRateLimitError)
    async def handle_upstream_rate_limit(request: Request, exc: UpstreamRateLimitError):
        logger.warning("[%s] AI provider rate limited: %s", _request_id(request), exc.context)
        return _error_response(
            request,
            429,
            "upstream_rate_limited",
            exc.message,
            headers={"Retry-After": "60"},
        )

    @app.exception_handler(UpstreamGenerationError)
    async def handle_upstream_generation(request: Request, exc: UpstreamGenerationError):
        logger.error("[%s] AI generation failed: %s | %s", _request_id(request), exc.message, exc.context)
        return _error_response(request, 502, "upstream_generation_failed", exc.message)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        logger.error("[%s] Configuration error: %s", _request_id(request), exc.message)
        return _error_response(
            request,
            500,
            "configuration_error",
            "The AI service is not configured on the server. Please contact support.",
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s", _request_id(request), exc.message, exc.context)
        return _error_response(
            request,
            500,
            "server_error",
            "An internal error occurred. Please try again later.",
        )

    @app.exception_handler(PromptMasterError)
    async def handle_application_error(request: Request, exc: PromptMasterError):
        logger.error("[%s] Unhandled application error %s: %s", _request_id(request), type(exc).__name__, exc.message)
        return _error_response(request, 500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", _request_id(request), str(exc), exc_info=True)
        return _error_response(
            request,
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="PromptMaster API",
        description=(
            "Multilingual prompt assistant. Write or speak a prompt in English, Amharic, "
            "Afaan Oromo, Tigrinya, Somali or Arabic; get it critiqued, improved or answered "
            "by Google Gemini, and read the result in your own language."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RateLimit → RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(prompts.router)
    app.include_router(templates.router)
    app.include_router(languages.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
