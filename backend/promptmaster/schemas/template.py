"""
PromptMaster Backend - Template Schemas
=======================================

What:  Read-only contracts for the public template catalogue.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from promptmaster.schemas.common import ApiModel


class TemplateResponse(ApiModel):
    id: uuid.UUID
    category: str
    name: str
    description: Optional[str] = None
    base_prompt: str = Field(description="Prefix the client prepends to the user's text")
    default_languages: List[str] = Field(default_factory=list)
    usage_count: int = 0
    created_at: datetime


class TemplateListResponse(ApiModel):
    templates: List[TemplateResponse]
    category: Optional[str] = Field(default=None, description="Set when filtered by category")
    total: int
    limit: int
    offset: int
