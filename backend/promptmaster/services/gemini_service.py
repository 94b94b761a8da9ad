"""
PromptMaster Backend - Google Gemini Service Implementation
===========================================================

What:  The Generation/Improvement Stage: plain completions, prompt
       critique/improvement, audio transcription, and model-based translation
       (the secondary translation strategy), all on Google Gemini.
How:   One GenerativeModel per process, configured lazily from settings so a
       missing key surfaces as ConfigurationError at call time instead of
       breaking app startup. Every call goes through _generate(), which
       times the call and maps SDK exceptions onto the application hierarchy.
Who:   Instantiated once at import; called by PromptPipeline and ModelTranslator.

Error Mapping:
    GEMINI_API_KEY missing            → ConfigurationError      (500)
    429 / RESOURCE_EXHAUSTED          → UpstreamRateLimitError  (429)
    any other SDK failure, empty text → UpstreamGenerationError (502)
    empty transcript                  → TranscriptionError      (422)

No retries: every failure is terminal for the current request.
"""

import logging
import time
import uuid
from typing import Any, List, Optional, Union

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from promptmaster.config import settings
from promptmaster.exceptions import (
    ConfigurationError,
    TranscriptionError,
    UpstreamGenerationError,
    UpstreamRateLimitError,
)
from promptmaster.languages import display_name
from promptmaster.services.llm_base import LLMService
from promptmaster.services.response_decoder import DecodedImprovement, decode_improvement

logger = logging.getLogger(__name__)

PLACEHOLDER_KEY = "your_gemini_api_key_here"


class GeminiService(LLMService):
    """
    Google Gemini implementation of the generation stage.

    Operations:
        generate()   → raw completion for a user query
        improve()    → DecodedImprovement (critique + improved prompt)
        transcribe() → verbatim transcript of an audio clip
        translate()  → direct model translation (fallback chain only)
    """

    GENERATE_PROMPT = """You are a helpful AI assistant that provides clear, concise, and useful responses to user queries.
Focus on being practical and actionable.

User Query: {text}"""

    IMPROVE_PROMPT = """You are a prompt engineering expert.
Analyze the given prompt, identify its weaknesses, and provide a vastly improved version.
Prove that the first one is wrong or inefficient by explaining the issues.

Return ONLY a JSON object with this key structure:
{{
    "critique": "Explanation of why the original prompt is weak and what was improved",
    "improvedPrompt": "The new, optimized prompt text"
}}

Do not wrap the JSON in markdown code blocks. Just return the raw JSON string.

Original Prompt: {text}"""

    TRANSCRIBE_PROMPT = "Transcribe this audio exactly as it is spoken. Return ONLY the text."

    TRANSLATE_PROMPT = """Translate the following text from {source} to {target}.
Return ONLY the translated text, without explanations, notes or quotation marks.

Text: {text}"""

    def __init__(self, model_name: Optional[str] = None):
        self.model_name = model_name or settings.gemini_model
        self._model: Any = None
        self._configured_key: Optional[str] = None
        logger.info("GeminiService initialized with model=%s", self.model_name)

    @property
    def is_configured(self) -> bool:
        key = (settings.gemini_api_key or "").strip()
        return bool(key) and key != PLACEHOLDER_KEY

    def _get_model(self) -> Any:
        """
        Returns the GenerativeModel, (re)configuring the SDK when the key changes.

        Raises:
            ConfigurationError: GEMINI_API_KEY is empty or still the placeholder.
        """
        if not self.is_configured:
            logger.error("Gemini call attempted without GEMINI_API_KEY")
            raise ConfigurationError(
                message="GEMINI_API_KEY is not configured",
                setting="GEMINI_API_KEY",
            )

        api_key = settings.gemini_api_key.strip()
        if self._model is None or self._configured_key != api_key:
            # The SDK keeps credentials in module-level state
            genai.configure(api_key=api_key)
            self._model = genai.GenerativeModel(self.model_name)
            self._configured_key = api_key
        return self._model

    @staticmethod
    def _response_text(response: Any) -> str:
        """Extracts text; the SDK raises ValueError when a candidate is blocked or empty."""
        try:
            return response.text or ""
        except ValueError:
            return ""

    async def _generate(self, contents: Union[str, List[Any]], operation: str) -> str:
        """
        Single Gemini call with timing and error translation.

        Args:
            contents:  Prompt string or multimodal parts list
            operation: Name used in logs and error context (generate, improve, ...)

        Returns:
            Response text, possibly empty. Callers decide whether empty is an error.
        """
        model = self._get_model()
        call_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        try:
            response = await model.generate_content_async(
                contents,
                request_options={"timeout": settings.gemini_timeout},
            )
        except (google_exceptions.TooManyRequests, google_exceptions.ResourceExhausted) as e:
            logger.warning("[%s] Gemini %s rate limited: %s", call_id, operation, str(e))
            raise UpstreamRateLimitError(context={"operation": operation, "call_id": call_id})
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "[%s] Gemini %s failed after %.0fms: %s",
                call_id,
                operation,
                duration_ms,
                str(e),
                exc_info=True,
            )
            raise UpstreamGenerationError(
                message=f"AI {operation} request failed. Please try again later.",
                context={"operation": operation, "call_id": call_id, "error_type": type(e).__name__},
            )

        text = self._response_text(response)
        logger.info(
            "[%s] Gemini %s completed in %.0fms, %d chars",
            call_id,
            operation,
            (time.time() - start_time) * 1000,
            len(text),
        )
        return text

    async def generate(self, text: str) -> str:
        completion = await self._generate(self.GENERATE_PROMPT.format(text=text), "generate")
        if not completion.strip():
            raise UpstreamGenerationError(
                message="Failed to generate response from Gemini",
                context={"operation": "generate"},
            )
        return completion

    async def improve(self, text: str) -> DecodedImprovement:
        raw = await self._generate(self.IMPROVE_PROMPT.format(text=text), "improve")
        if not raw.strip():
            raise UpstreamGenerationError(
                message="Failed to improve prompt",
                context={"operation": "improve"},
            )

        decoded = decode_improvement(raw)
        logger.debug("Improve response decoded as %s", decoded.kind.value)
        return decoded

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        """
        Transcribe an audio clip.

        The clip goes inline as a Blob part; the SDK base64-encodes inline data
        on the wire, so no upload step is needed for short voice notes.
        """
        contents = [
            {"mime_type": mime_type, "data": audio},
            self.TRANSCRIBE_PROMPT,
        ]
        transcript = (await self._generate(contents, "transcribe")).strip()
        if not transcript:
            raise TranscriptionError(context={"mime_type": mime_type, "audio_bytes": len(audio)})
        return transcript

    async def translate(self, text: str, source_language: str, target_language: str) -> str:
        prompt = self.TRANSLATE_PROMPT.format(
            source=display_name(source_language),
            target=display_name(target_language),
            text=text,
        )
        translated = (await self._generate(prompt, "translate")).strip()
        if not translated:
            raise UpstreamGenerationError(
                message="Model translation returned no text",
                context={"operation": "translate"},
            )
        return translated

    async def health_check(self) -> bool:
        """
        Check if Gemini is reachable by listing models (no token cost).

        Returns False when the key is missing or the call fails.
        """
        if not self.is_configured:
            return False
        try:
            self._get_model()
            model_names = [m.name for m in genai.list_models()]
            target = f"models/{self.model_name}"
            if target not in model_names:
                logger.warning("Configured model %s not found in available models", target)
            return True
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False


# ── Singleton Instance ────────────────────────────────────────────────────
gemini_service = GeminiService()
