"""
PromptMaster Backend - Improve Endpoint Schemas
===============================================

What:  Request/response contracts for POST /api/prompts/improve and
       POST /api/prompts/voice.

Wire shape (matches the mobile client):
    Request:  {"promptText": "...", "language": "am", "sourceLanguage": "en"}
    Response: {"id": "...", "originalInput": "...", "improvedEnglish": "...",
               "englishCritique": "...", "improvedLocal": "..." | null,
               "localCritique": "..." | null, "language": "am"}

`language` is the language the user wants the result in. `sourceLanguage`
is the language the prompt is written in; it defaults to English for typed
prompts.
"""

import uuid
from typing import Optional

from pydantic import Field, field_validator

from promptmaster.config import settings
from promptmaster.languages import LanguageTag
from promptmaster.schemas.common import ApiModel


class ImproveRequest(ApiModel):
    prompt_text: str = Field(
        min_length=1,
        max_length=settings.max_prompt_length,
        description="Prompt to critique and improve",
    )
    language: LanguageTag = Field(
        default=LanguageTag.ENGLISH,
        description="Language to localize the improved prompt and critique into",
    )
    source_language: LanguageTag = Field(
        default=LanguageTag.ENGLISH,
        description="Language the prompt is written in",
    )

    @field_validator("prompt_text")
    @classmethod
    def strip_prompt(cls, v: str) -> str:
        """Rejects whitespace-only prompts after trimming."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("promptText must not be blank")
        return stripped


class ImproveResponse(ApiModel):
    """
    Result of an improve run (text or voice).

    improvedLocal/localCritique are null when the requested language is English.
    """
    id: Optional[uuid.UUID] = Field(default=None, description="Stored prompt record ID")
    original_input: str = Field(description="Prompt as submitted (or transcribed)")
    improved_english: str = Field(description="Improved prompt in English")
    english_critique: Optional[str] = Field(default=None, description="Why the original was weak")
    improved_local: Optional[str] = Field(default=None, description="Improved prompt in the requested language")
    local_critique: Optional[str] = Field(default=None, description="Critique in the requested language")
    language: str = Field(description="Requested output language tag")
