"""
PromptMaster Backend - Prompt Service (Business Logic Orchestrator)
===================================================================

What:  Coordinates validate → pipeline → persist for every prompt operation,
       and owns the prompt history (list, detail, favorite, delete).
How:   Builds a PipelineRequest, hands it to prompt_pipeline, stores the
       PipelineResult as a PromptRecord and maps it to a response schema.
Who:   Called by the /api/prompts route handlers.

Orchestration Flow (POST /api/prompts/voice):
    ┌──────────┐    ┌─────────────┐    ┌──────────────────────┐    ┌──────────┐
    │  Upload  │───▶│  Validate   │───▶│  Pipeline            │───▶│  Store   │
    │  (Route) │    │ (AudioServ) │    │  transcribe→improve  │    │  (DB)    │
    └──────────┘    └─────────────┘    │  →localize           │    └──────────┘
                                       └──────────────────────┘

Failure behaviour:
    - Validation and generation errors propagate unchanged; nothing is stored
    - Translation problems never surface (fail-soft chain)
    - SQLAlchemy failures are wrapped in DatabaseError; details stay in the log

The service is stateless: the session and the caller's user_id are passed
into every call. Records are owned by that user and history operations never
see another user's rows. The session is committed by get_db_session() when
the request finishes.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptmaster.exceptions import DatabaseError, NotFoundError
from promptmaster.languages import WORKING_LANGUAGE, LanguageTag, tag_value
from promptmaster.models.prompt import PromptRecord
from promptmaster.schemas.pipeline import ImproveResponse
from promptmaster.schemas.prompt import PromptListResponse, PromptResponse
from promptmaster.services.audio_service import audio_service
from promptmaster.services.pipeline import (
    PipelineMode,
    PipelineRequest,
    PipelineResult,
    prompt_pipeline,
)

logger = logging.getLogger(__name__)


class PromptService:
    """
    Business logic layer for prompt operations.

    Responsibilities:
        - improve_prompt():       text → critique + improved prompt (+ localization)
        - improve_voice_prompt(): audio → transcript → same as improve_prompt
        - create_prompt():        text → generated answer (+ localization)
        - list/get/delete/toggle_favorite(): prompt history
    """

    # ── Pipeline-backed operations ────────────────────────────────────────

    async def improve_prompt(
        self,
        db: AsyncSession,
        user_id: str,
        prompt_text: str,
        language: LanguageTag = LanguageTag.ENGLISH,
        source_language: LanguageTag = LanguageTag.ENGLISH,
    ) -> ImproveResponse:
        request = PipelineRequest(
            raw_input=prompt_text,
            source_language=tag_value(source_language),
            target_language=tag_value(language),
            mode=PipelineMode.IMPROVE,
        )
        result = await prompt_pipeline.run(request)
        record = await self._save_result(db, user_id, result)
        return self._to_improve_response(record, result)

    async def improve_voice_prompt(
        self,
        db: AsyncSession,
        user_id: str,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
        language: LanguageTag = LanguageTag.ENGLISH,
        source_language: Optional[LanguageTag] = None,
    ) -> ImproveResponse:
        """
        Voice variant of improve_prompt.

        The speaker is assumed to talk in the language they want the answer
        in, so source_language defaults to language.

        Raises:
            ValidationError: unsupported, empty or oversized audio
            TranscriptionError: nothing could be transcribed
        """
        mime_type = audio_service.validate(filename, content, content_length)

        request = PipelineRequest(
            raw_input="",
            source_language=tag_value(source_language or language),
            target_language=tag_value(language),
            mode=PipelineMode.TRANSCRIBE_IMPROVE,
            audio=content,
            audio_mime_type=mime_type,
        )
        result = await prompt_pipeline.run(request)
        logger.info("Voice prompt transcribed to %d chars", len(result.original_input))

        record = await self._save_result(db, user_id, result)
        return self._to_improve_response(record, result)

    async def create_prompt(
        self,
        db: AsyncSession,
        user_id: str,
        input_text: str,
        language_input: LanguageTag = LanguageTag.ENGLISH,
        language_output: LanguageTag = LanguageTag.ENGLISH,
        category: Optional[str] = None,
    ) -> PromptResponse:
        """Generate flow: normalize the input, answer it, localize the answer, store it."""
        request = PipelineRequest(
            raw_input=input_text,
            source_language=tag_value(language_input),
            target_language=tag_value(language_output),
            mode=PipelineMode.GENERATE,
        )
        result = await prompt_pipeline.run(request)
        record = await self._save_result(db, user_id, result, category=category)
        return self._to_prompt_response(record)

    # ── History ───────────────────────────────────────────────────────────

    async def list_prompts(
        self,
        db: AsyncSession,
        user_id: str,
        category: Optional[str] = None,
        favorite: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> PromptListResponse:
        """
        Offset-paginated history of one user, newest first.

        Query plan (no filters):
            SELECT * FROM prompts WHERE user_id = :user_id
            ORDER BY created_at DESC LIMIT :limit OFFSET :offset
            → idx_prompts_user_created_at
        """
        try:
            query = select(PromptRecord).where(PromptRecord.user_id == user_id)
            count_query = select(func.count(PromptRecord.id)).where(PromptRecord.user_id == user_id)

            if category:
                query = query.where(PromptRecord.category == category)
                count_query = count_query.where(PromptRecord.category == category)
            if favorite is not None:
                query = query.where(PromptRecord.is_favorite == favorite)
                count_query = count_query.where(PromptRecord.is_favorite == favorite)

            query = query.order_by(desc(PromptRecord.created_at)).limit(limit).offset(offset)

            result = await db.execute(query)
            records = list(result.scalars().all())

            count_result = await db.execute(count_query)
            total = count_result.scalar() or 0

            return PromptListResponse(
                prompts=[self._to_prompt_response(record) for record in records],
                total=total,
                limit=limit,
                offset=offset,
            )

        except Exception as e:
            logger.error("Database error listing prompts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve prompts. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_prompt(self, db: AsyncSession, user_id: str, prompt_id: uuid.UUID) -> PromptResponse:
        record = await self._get_record(db, user_id, prompt_id)
        return self._to_prompt_response(record)

    async def delete_prompt(self, db: AsyncSession, user_id: str, prompt_id: uuid.UUID) -> None:
        record = await self._get_record(db, user_id, prompt_id)
        try:
            await db.delete(record)
            await db.flush()
        except Exception as e:
            logger.error("Database error deleting prompt %s: %s", prompt_id, str(e))
            raise DatabaseError(
                message="Could not delete the prompt. Please try again.",
                context={"prompt_id": str(prompt_id)},
            )
        logger.info("Prompt %s deleted", prompt_id)

    async def toggle_favorite(self, db: AsyncSession, user_id: str, prompt_id: uuid.UUID) -> PromptResponse:
        record = await self._get_record(db, user_id, prompt_id)
        record.is_favorite = not record.is_favorite
        try:
            await db.flush()
        except Exception as e:
            logger.error("Database error updating prompt %s: %s", prompt_id, str(e))
            raise DatabaseError(
                message="Could not update the prompt. Please try again.",
                context={"prompt_id": str(prompt_id)},
            )
        return self._to_prompt_response(record)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_record(self, db: AsyncSession, user_id: str, prompt_id: uuid.UUID) -> PromptRecord:
        """
        Primary-key lookup restricted to the caller's own prompts.

        Another user's prompt is reported exactly like a missing one, so
        IDs reveal nothing across accounts.

        Raises:
            NotFoundError: no prompt with that ID owned by user_id (→ 404)
            DatabaseError: query failed (→ 500)
        """
        try:
            result = await db.execute(
                select(PromptRecord).where(
                    PromptRecord.id == prompt_id,
                    PromptRecord.user_id == user_id,
                )
            )
            record = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching prompt %s: %s", prompt_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the prompt. Please try again.",
                context={"prompt_id": str(prompt_id)},
            )

        if record is None:
            raise NotFoundError(resource="prompt", resource_id=str(prompt_id))
        return record

    async def _save_result(
        self,
        db: AsyncSession,
        user_id: str,
        result: PipelineResult,
        category: Optional[str] = None,
    ) -> PromptRecord:
        # english_input is only worth storing when a translation happened
        english_input = None
        if result.source_language != WORKING_LANGUAGE.value:
            english_input = result.english_input

        record = PromptRecord(
            id=uuid.uuid4(),
            user_id=user_id,
            input_text=result.original_input,
            english_input=english_input,
            english_output=result.english_output,
            english_critique=result.english_critique,
            localized_output=result.localized_output,
            localized_critique=result.localized_critique,
            source_language=result.source_language,
            target_language=result.language,
            mode=result.mode.value,
            category=category,
            is_favorite=False,
            created_at=datetime.now(timezone.utc),
        )

        try:
            db.add(record)
            await db.flush()
        except Exception as e:
            logger.error("Failed to store prompt: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Your prompt was processed but could not be saved. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info(
            "Prompt %s stored (mode=%s, %s→%s)",
            record.id,
            record.mode,
            record.source_language,
            record.target_language,
        )
        return record

    @staticmethod
    def _to_prompt_response(record: PromptRecord) -> PromptResponse:
        return PromptResponse(
            id=record.id,
            input_text=record.input_text,
            english_input=record.english_input,
            english_output=record.english_output,
            english_critique=record.english_critique,
            localized_output=record.localized_output,
            localized_critique=record.localized_critique,
            source_language=record.source_language,
            target_language=record.target_language,
            mode=record.mode,
            category=record.category,
            is_favorite=record.is_favorite,
            created_at=record.created_at,
            display_output=record.localized_output or record.english_output,
        )

    @staticmethod
    def _to_improve_response(record: PromptRecord, result: PipelineResult) -> ImproveResponse:
        return ImproveResponse(
            id=record.id,
            original_input=result.original_input,
            improved_english=result.english_output,
            english_critique=result.english_critique,
            improved_local=result.localized_output,
            local_critique=result.localized_critique,
            language=result.language,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
prompt_service = PromptService()
