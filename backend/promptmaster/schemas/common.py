"""
PromptMaster Backend - Shared Schema Pieces
===========================================

What:  The camelCase base model used by every API contract, plus the error,
       health and language responses shared across routers.
How:   `ApiModel` generates camelCase aliases (promptText, improvedEnglish, ...)
       for the mobile client while Python code keeps snake_case attributes.
       FastAPI serializes response models by alias, so the wire format is
       camelCase without per-field aliases.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for request/response schemas: camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "upstream_rate_limited",
            "message": "AI provider rate limit exceeded. Please try again later.",
            "details": {"operation": "improve"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(ApiModel):
    message: str = Field(description="Human-readable confirmation")


class LanguageItem(ApiModel):
    code: str = Field(description="Language tag, e.g. 'am'")
    name: str = Field(description="Display name, e.g. 'Amharic'")


class LanguageListResponse(ApiModel):
    languages: List[LanguageItem]
    working_language: str = Field(description="Pivot language used for generation")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    gemini: str = Field(description="Gemini API status: available, unavailable, not_configured")
    translation: str = Field(description="Translation provider: configured, fallback_only")
    uptime_seconds: float = Field(description="Seconds since service started")
