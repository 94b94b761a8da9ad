"""
PromptMaster Backend - Prompt History Schemas
=============================================

What:  Contracts for creating prompts (generate flow) and browsing history.
Who:   POST /api/prompts, GET /api/prompts, GET/DELETE /api/prompts/{id},
       PATCH /api/prompts/{id}/favorite.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from promptmaster.config import settings
from promptmaster.languages import LanguageTag
from promptmaster.schemas.common import ApiModel


class CreatePromptRequest(ApiModel):
    """Input for the generate flow: translate in, answer, translate out."""
    input_text: str = Field(min_length=1, max_length=settings.max_prompt_length)
    language_input: LanguageTag = Field(default=LanguageTag.ENGLISH)
    language_output: LanguageTag = Field(default=LanguageTag.ENGLISH)
    category: Optional[str] = Field(default=None, max_length=50)

    @field_validator("input_text")
    @classmethod
    def strip_input(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("inputText must not be blank")
        return stripped

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class PromptResponse(ApiModel):
    """
    Full representation of a stored prompt.

    display_output is what the client shows: the localized text when one
    exists, otherwise the English output.
    """
    id: uuid.UUID
    input_text: str
    english_input: Optional[str] = None
    english_output: str
    english_critique: Optional[str] = None
    localized_output: Optional[str] = None
    localized_critique: Optional[str] = None
    source_language: str
    target_language: str
    mode: str
    category: Optional[str] = None
    is_favorite: bool = False
    created_at: datetime
    display_output: str = ""


class PromptListResponse(ApiModel):
    """Offset-paginated prompt history, newest first."""
    prompts: List[PromptResponse]
    total: int = Field(description="Total prompts matching the filters")
    limit: int
    offset: int
