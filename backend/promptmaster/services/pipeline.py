"""
PromptMaster Backend - Prompt Pipeline (Orchestration State Machine)
====================================================================

What:  Runs one request through Normalizer → Generation/Improvement → Localizer.
How:   A short-lived, per-request state machine:

           RECEIVED → [TRANSCRIBING] → NORMALIZING → GENERATING → LOCALIZING → COMPLETE
                            │                              │
                            └──────────── FAILED ──────────┘

       TRANSCRIBING only happens in transcribe_improve mode and runs exactly
       once, before improvement. Normalizing and localizing go through the
       fail-soft TranslationService and cannot fail; only transcription and
       generation can end a request in FAILED.
Who:   PromptService builds a PipelineRequest and calls prompt_pipeline.run().

The result is assembled from locals once every stage has finished, so a
PipelineResult is never observed half-populated. There is no resumption: a
failed request is simply resubmitted by the client.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from promptmaster.exceptions import ValidationError
from promptmaster.languages import WORKING_LANGUAGE, needs_translation, tag_value
from promptmaster.middleware.request_id import get_request_id
from promptmaster.services.gemini_service import gemini_service
from promptmaster.services.llm_base import LLMService
from promptmaster.services.translation_service import TranslationService, translation_service

logger = logging.getLogger(__name__)


class PipelineMode(str, Enum):
    GENERATE = "generate"
    IMPROVE = "improve"
    TRANSCRIBE_IMPROVE = "transcribe_improve"


class PipelineStage(str, Enum):
    RECEIVED = "received"
    TRANSCRIBING = "transcribing"
    NORMALIZING = "normalizing"
    GENERATING = "generating"
    LOCALIZING = "localizing"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineRequest:
    """
    Immutable input of one pipeline run.

    raw_input is empty for voice requests; the transcript replaces it once
    TRANSCRIBING finishes.
    """
    raw_input: str
    source_language: str
    target_language: str
    mode: PipelineMode
    audio: Optional[bytes] = None
    audio_mime_type: Optional[str] = None

    def __post_init__(self):
        if self.mode is PipelineMode.TRANSCRIBE_IMPROVE:
            if not self.audio or not self.audio_mime_type:
                raise ValidationError(message="Audio is required for voice prompts", field="audio")
        elif not (self.raw_input or "").strip():
            raise ValidationError(message="Prompt text must not be empty", field="prompt_text")


@dataclass(frozen=True)
class PipelineResult:
    original_input: str
    english_input: str
    english_output: str
    english_critique: Optional[str]
    localized_output: Optional[str]
    localized_critique: Optional[str]
    language: str
    source_language: str
    mode: PipelineMode


class PromptPipeline:
    """Stateless orchestrator; one instance serves every request."""

    def __init__(self, llm: LLMService, translator: TranslationService):
        self.llm = llm
        self.translator = translator

    @staticmethod
    def _transition(mode: PipelineMode, stage: PipelineStage) -> None:
        logger.debug("[%s] %s pipeline → %s", get_request_id(), mode.value, stage.value)

    async def normalize(self, text: str, source_language) -> str:
        """Brings text into the working language. Never raises."""
        if not needs_translation(source_language, WORKING_LANGUAGE):
            return text
        return await self.translator.translate(text, source_language, WORKING_LANGUAGE)

    async def localize(
        self,
        english_output: str,
        english_critique: Optional[str],
        target_language,
    ) -> Tuple[Optional[str], Optional[str]]:
        """
        Translates the English result into the target language.

        Returns (None, None) for an English target without calling the
        translator. With a critique, both fields are translated concurrently
        and the call returns only when both legs have finished.
        """
        target = tag_value(target_language)
        if not needs_translation(WORKING_LANGUAGE, target):
            return None, None

        if english_critique is None:
            localized_output = await self.translator.translate(english_output, WORKING_LANGUAGE, target)
            return localized_output, None

        localized_output, localized_critique = await asyncio.gather(
            self.translator.translate(english_output, WORKING_LANGUAGE, target),
            self.translator.translate(english_critique, WORKING_LANGUAGE, target),
        )
        return localized_output, localized_critique

    async def run(self, request: PipelineRequest) -> PipelineResult:
        """
        Executes every stage for one request.

        Raises:
            TranscriptionError: voice input transcribed to nothing
            ConfigurationError, UpstreamRateLimitError, UpstreamGenerationError:
                from the generation stage
        """
        mode = request.mode
        stage = PipelineStage.RECEIVED
        self._transition(mode, stage)

        original_input = request.raw_input
        english_critique: Optional[str] = None

        try:
            if mode is PipelineMode.TRANSCRIBE_IMPROVE:
                stage = PipelineStage.TRANSCRIBING
                self._transition(mode, stage)
                original_input = await self.llm.transcribe(request.audio, request.audio_mime_type)

            stage = PipelineStage.NORMALIZING
            self._transition(mode, stage)
            english_input = await self.normalize(original_input, request.source_language)

            stage = PipelineStage.GENERATING
            self._transition(mode, stage)
            if mode is PipelineMode.GENERATE:
                english_output = await self.llm.generate(english_input)
            else:
                decoded = await self.llm.improve(english_input)
                english_output = decoded.improved_prompt
                english_critique = decoded.critique
        except Exception as e:
            logger.debug(
                "[%s] %s pipeline → %s (from %s: %s)",
                get_request_id(),
                mode.value,
                PipelineStage.FAILED.value,
                stage.value,
                type(e).__name__,
            )
            raise

        stage = PipelineStage.LOCALIZING
        self._transition(mode, stage)
        localized_output, localized_critique = await self.localize(
            english_output, english_critique, request.target_language
        )

        self._transition(mode, PipelineStage.COMPLETE)
        return PipelineResult(
            original_input=original_input,
            english_input=english_input,
            english_output=english_output,
            english_critique=english_critique,
            localized_output=localized_output,
            localized_critique=localized_critique,
            language=tag_value(request.target_language),
            source_language=tag_value(request.source_language),
            mode=mode,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
prompt_pipeline = PromptPipeline(llm=gemini_service, translator=translation_service)
