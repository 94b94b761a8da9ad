"""
PromptMaster Backend - Translation Service (Fail-Soft Fallback Chain)
=====================================================================

What:  Moves text between a user's language and English.
How:   An ordered chain of strategies:
           1. HasabTranslator  - dedicated translation HTTP API (primary)
           2. ModelTranslator  - direct instruction to the generative model
       followed by the identity fallback (original text returned unchanged).
Who:   PromptPipeline.normalize() and PromptPipeline.localize().

Contract:
    translate() NEVER raises. Every strategy failure is logged at WARNING and
    the next strategy is tried; when all fail the caller gets its input back.
    Same-language or blank input short-circuits without any outbound call.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import httpx

from promptmaster.config import settings
from promptmaster.exceptions import TranslationDegradedError
from promptmaster.languages import needs_translation, tag_value
from promptmaster.services.gemini_service import gemini_service
from promptmaster.services.llm_base import LLMService

logger = logging.getLogger(__name__)


class TranslationStrategy(ABC):
    """One link of the fallback chain. Raising means "try the next one"."""

    name: str = "strategy"

    @abstractmethod
    async def translate(self, text: str, source_language: str, target_language: str) -> str:
        ...

    async def aclose(self) -> None:
        return None


class HasabTranslator(TranslationStrategy):
    """
    Primary strategy: the Hasab translation API.

    Request:  POST {TRANSLATION_API_URL}
              Authorization: Bearer {TRANSLATION_API_KEY}
              {"text": "...", "source_language": "en", "target_language": "am"}
    Response: {"translated_text": "..."} (older deployments answer "translation")

    A shared httpx.AsyncClient is created lazily and reused across requests;
    its timeout bounds every call so a slow provider cannot stall a request.
    """

    name = "hasab"

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_url = api_url or settings.translation_api_url
        self.api_key = settings.translation_api_key if api_key is None else api_key
        self.timeout = timeout or settings.translation_timeout
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool((self.api_key or "").strip())

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    @staticmethod
    def _extract(payload: Any) -> str:
        if not isinstance(payload, dict):
            return ""
        for key in ("translated_text", "translation"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return ""

    async def translate(self, text: str, source_language: str, target_language: str) -> str:
        if not self.is_configured:
            raise TranslationDegradedError(
                message="TRANSLATION_API_KEY is not configured",
                strategy=self.name,
            )

        body: Dict[str, str] = {
            "text": text,
            "source_language": source_language,
            "target_language": target_language,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._get_client().post(self.api_url, json=body, headers=headers)
        except httpx.TimeoutException:
            raise TranslationDegradedError(
                message=f"Translation API timed out after {self.timeout}s",
                strategy=self.name,
            )
        except httpx.HTTPError as e:
            raise TranslationDegradedError(
                message=f"Translation API unreachable: {type(e).__name__}",
                strategy=self.name,
            )

        if not response.is_success:
            raise TranslationDegradedError(
                message=f"Translation API returned HTTP {response.status_code}",
                strategy=self.name,
                context={"status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError:
            raise TranslationDegradedError(
                message="Translation API returned a non-JSON body",
                strategy=self.name,
            )

        translated = self._extract(payload)
        if not translated:
            raise TranslationDegradedError(
                message="Translation API response had no translated text",
                strategy=self.name,
            )
        return translated

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class ModelTranslator(TranslationStrategy):
    """Secondary strategy: ask the generative model to translate directly."""

    name = "model"

    def __init__(self, llm: LLMService):
        self.llm = llm

    async def translate(self, text: str, source_language: str, target_language: str) -> str:
        return await self.llm.translate(text, source_language, target_language)


class TranslationService:
    """
    Runs the fallback chain.

    Usage:
        english = await translation_service.translate(text, "am", "en")
    """

    def __init__(self, strategies: Sequence[TranslationStrategy]):
        self.strategies: List[TranslationStrategy] = list(strategies)

    async def translate(self, text: str, source_language, target_language) -> str:
        source = tag_value(source_language)
        target = tag_value(target_language)

        if not needs_translation(source, target) or not (text or "").strip():
            return text

        for strategy in self.strategies:
            start_time = time.time()
            try:
                translated = await strategy.translate(text, source, target)
            except Exception as e:
                logger.warning(
                    "Translation %s→%s via %s failed, trying next strategy: %s",
                    source,
                    target,
                    strategy.name,
                    str(e),
                )
                continue

            if translated and translated.strip():
                logger.debug(
                    "Translated %s→%s via %s in %.0fms",
                    source,
                    target,
                    strategy.name,
                    (time.time() - start_time) * 1000,
                )
                return translated.strip()

            logger.warning("Translation via %s returned empty text", strategy.name)

        logger.warning(
            "All translation strategies failed for %s→%s; returning original text",
            source,
            target,
        )
        return text

    async def aclose(self) -> None:
        for strategy in self.strategies:
            await strategy.aclose()


def build_translation_service(llm: LLMService) -> TranslationService:
    return TranslationService([HasabTranslator(), ModelTranslator(llm)])


# ── Singleton Instance ────────────────────────────────────────────────────
translation_service = build_translation_service(gemini_service)
