"""
PromptMaster Backend - Languages Route
======================================

What:  GET /api/languages, the language tags the API accepts.
"""

from fastapi import APIRouter

from promptmaster.languages import WORKING_LANGUAGE, list_languages
from promptmaster.schemas.common import LanguageItem, LanguageListResponse

router = APIRouter(prefix="/api", tags=["Languages"])


@router.get(
    "/languages",
    response_model=LanguageListResponse,
    summary="List supported languages",
)
async def get_languages() -> LanguageListResponse:
    return LanguageListResponse(
        languages=[LanguageItem(**item) for item in list_languages()],
        working_language=WORKING_LANGUAGE.value,
    )
