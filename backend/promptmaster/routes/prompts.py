"""
PromptMaster Backend - Prompt Route Handlers
============================================

What:  Improve (text and voice), generate, and prompt history endpoints.
How:   Thin handlers: resolve the caller (X-User-ID), read the request,
       delegate to PromptService, set status code and headers. Errors
       propagate to the global handlers.
Who:   Called by the mobile client's improve, chat and history screens.

Endpoints:
    POST   /api/prompts/improve         text prompt → critique + improved prompt
    POST   /api/prompts/voice           recorded prompt → same as improve
    POST   /api/prompts                 generate an answer (201)
    GET    /api/prompts                 history, newest first (X-Total-Count)
    GET    /api/prompts/{id}            one stored prompt
    DELETE /api/prompts/{id}            remove a stored prompt
    PATCH  /api/prompts/{id}/favorite   toggle the favorite flag

Every endpoint here acts for the user named in X-User-ID (401 without it).
History endpoints only ever see that user's prompts.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from promptmaster.auth import get_current_user_id
from promptmaster.database import get_db_session
from promptmaster.languages import LanguageTag
from promptmaster.schemas.common import ErrorResponse, MessageResponse
from promptmaster.schemas.pipeline import ImproveRequest, ImproveResponse
from promptmaster.schemas.prompt import CreatePromptRequest, PromptListResponse, PromptResponse
from promptmaster.services.prompt_service import prompt_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Prompts"])

# Shared error documentation for endpoints that call the model
AI_ERROR_RESPONSES = {
    401: {"description": "Missing or invalid X-User-ID header", "model": ErrorResponse},
    429: {"description": "Rate limit exceeded (server or AI provider)", "model": ErrorResponse},
    500: {"description": "AI service not configured or database error", "model": ErrorResponse},
    502: {"description": "AI provider returned no usable response", "model": ErrorResponse},
}


@router.post(
    "/prompts/improve",
    response_model=ImproveResponse,
    responses={
        200: {"description": "Prompt improved", "model": ImproveResponse},
        **AI_ERROR_RESPONSES,
    },
    summary="Critique and improve a prompt",
    description=(
        "Translates the prompt to English when needed, asks Gemini for a critique and "
        "an improved version, then translates both back into the requested language. "
        "improvedLocal and localCritique are null when the requested language is English."
    ),
)
async def improve_prompt(
    payload: ImproveRequest,
    db: AsyncSession = Depends(get_db_session),
    user_id: str = Depends(get_current_user_id),
) -> ImproveResponse:
    logger.info(
        "Improve request: %d chars, %s→%s",
        len(payload.prompt_text),
        payload.source_language.value,
        payload.language.value,
    )
    return await prompt_service.improve_prompt(
        db=db,
        user_id=user_id,
        prompt_text=payload.prompt_text,
        language=payload.language,
        source_language=payload.source_language,
    )


@router.post(
    "/prompts/voice",
    response_model=ImproveResponse,
    responses={
        200: {"description": "Voice prompt transcribed and improved", "model": ImproveResponse},
        400: {"description": "Unsupported, empty or oversized audio", "model": ErrorResponse},
        422: {"description": "Audio could not be transcribed", "model": ErrorResponse},
        **AI_ERROR_RESPONSES,
    },
    summary="Improve a spoken prompt",
    description=(
        "Upload a recorded prompt (m4a, mp3, wav, aac, ogg, webm or flac). The audio is "
        "transcribed once, then improved and localized like a typed prompt. "
        "originalInput holds the transcript."
    ),
)
async def improve_voice_prompt(
    audio: UploadFile = File(..., description="Recorded prompt audio"),
    language: LanguageTag = Form(
        default=LanguageTag.ENGLISH,
        description="Language to return the improved prompt in",
    ),
    source_language: Optional[LanguageTag] = Form(
        default=None,
        alias="sourceLanguage",
        description="Spoken language; defaults to `language`",
    ),
    db: AsyncSession = Depends(get_db_session),
    user_id: str = Depends(get_current_user_id),
) -> ImproveResponse:
    content = await audio.read()
    logger.info(
        "Voice request: filename=%s, size=%d bytes, language=%s",
        audio.filename or "unknown",
        len(content),
        language.value,
    )

    try:
        return await prompt_service.improve_voice_prompt(
            db=db,
            user_id=user_id,
            filename=audio.filename or "recording.m4a",
            content=content,
            content_length=audio.size,
            language=language,
            source_language=source_language,
        )
    finally:
        await audio.close()


@router.post(
    "/prompts",
    status_code=201,
    response_model=PromptResponse,
    responses={
        201: {"description": "Answer generated and stored", "model": PromptResponse},
        **AI_ERROR_RESPONSES,
    },
    summary="Generate an answer to a prompt",
    description=(
        "Translates the input to English when needed, generates an answer with Gemini "
        "and translates it into languageOutput. displayOutput is the text to show."
    ),
)
async def create_prompt(
    payload: CreatePromptRequest,
    db: AsyncSession = Depends(get_db_session),
    user_id: str = Depends(get_current_user_id),
) -> PromptResponse:
    return await prompt_service.create_prompt(
        db=db,
        user_id=user_id,
        input_text=payload.input_text,
        language_input=payload.language_input,
        language_output=payload.language_output,
        category=payload.category,
    )


@router.get(
    "/prompts",
    response_model=PromptListResponse,
    responses={
        200: {"description": "Page of stored prompts", "model": PromptListResponse},
        401: {"description": "Missing or invalid X-User-ID header", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List prompt history",
    description="Offset-paginated prompt history, newest first. Total count is also sent in X-Total-Count.",
)
async def list_prompts(
    response: Response,
    category: Optional[str] = Query(default=None, max_length=50, description="Only prompts in this category"),
    favorite: Optional[bool] = Query(default=None, description="Only favorites (true) or non-favorites (false)"),
    limit: int = Query(default=50, ge=1, le=100, description="Items per page (max 100)"),
    offset: int = Query(default=0, ge=0, description="Items to skip"),
    db: AsyncSession = Depends(get_db_session),
    user_id: str = Depends(get_current_user_id),
) -> PromptListResponse:
    result = await prompt_service.list_prompts(
        db=db,
        user_id=user_id,
        category=category,
        favorite=favorite,
        limit=limit,
        offset=offset,
    )
    response.headers["X-Total-Count"] = str(result.total)
    return result


@router.get(
    "/prompts/{prompt_id}",
    response_model=PromptResponse,
    responses={
        401: {"description": "Missing or invalid X-User-ID header", "model": ErrorResponse},
        404: {"description": "Prompt not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a stored prompt",
)
async def get_prompt(
    prompt_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    user_id: str = Depends(get_current_user_id),
) -> PromptResponse:
    return await prompt_service.get_prompt(db=db, user_id=user_id, prompt_id=prompt_id)


@router.delete(
    "/prompts/{prompt_id}",
    response_model=MessageResponse,
    responses={
        401: {"description": "Missing or invalid X-User-ID header", "model": ErrorResponse},
        404: {"description": "Prompt not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a stored prompt",
)
async def delete_prompt(
    prompt_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    user_id: str = Depends(get_current_user_id),
) -> MessageResponse:
    await prompt_service.delete_prompt(db=db, user_id=user_id, prompt_id=prompt_id)
    return MessageResponse(message="Prompt deleted successfully")


@router.patch(
    "/prompts/{prompt_id}/favorite",
    response_model=PromptResponse,
    responses={
        401: {"description": "Missing or invalid X-User-ID header", "model": ErrorResponse},
        404: {"description": "Prompt not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Toggle the favorite flag",
)
async def toggle_favorite(
    prompt_id: UUID,
    db: AsyncSession = Depends(get_db_session),
    user_id: str = Depends(get_current_user_id),
) -> PromptResponse:
    return await prompt_service.toggle_favorite(db=db, user_id=user_id, prompt_id=prompt_id)
