"""
PromptMaster Backend - Health Check Route
=========================================

What:  Health check endpoint for monitoring and container probes.
How:   Runs lightweight checks against each dependency.
Who:   Docker health checks, load balancers, uptime monitors.

Status levels:
    healthy:   database and Gemini reachable
    degraded:  Gemini missing or unreachable (history still works)
    unhealthy: database unreachable

The translation provider never affects the status: without it the
fallback chain still serves translations through the model.
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from promptmaster import __version__
from promptmaster.database import engine
from promptmaster.schemas.common import HealthResponse
from promptmaster.services.gemini_service import gemini_service
from promptmaster.services.translation_service import HasabTranslator, translation_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


def _translation_status() -> str:
    for strategy in translation_service.strategies:
        if isinstance(strategy, HasabTranslator) and strategy.is_configured:
            return "configured"
    return "fallback_only"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the status of the backend and its dependencies.",
)
async def health_check() -> HealthResponse:
    """
    Check details:
        Database: SELECT 1
        Gemini:   list_models() (no token cost); skipped when no key is set
    """
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    if not gemini_service.is_configured:
        gemini_status = "not_configured"
    elif await gemini_service.health_check():
        gemini_status = "available"
    else:
        gemini_status = "unavailable"

    if gemini_status != "available" and overall != "unhealthy":
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        gemini=gemini_status,
        translation=_translation_status(),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
