"""
PromptMaster Backend - Translation Fallback Chain Tests
=======================================================

What:  HasabTranslator against httpx.MockTransport, and TranslationService
       walking the strategy list.

What we test:
    ✅ Same-language translation makes zero provider calls
    ✅ Primary success: request shape and both response keys
    ✅ Timeout / 401 / malformed body never raise from the chain
    ✅ Falls through primary → model → identity
"""

import json

import httpx
import pytest

from promptmaster.exceptions import TranslationDegradedError, UpstreamGenerationError
from promptmaster.services.translation_service import (
    HasabTranslator,
    ModelTranslator,
    TranslationService,
)

API_URL = "https://translate.test/v1/translate"


def _translator(handler, api_key="secret-key"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=5.0)
    return HasabTranslator(api_url=API_URL, api_key=api_key, timeout=5.0, client=client)


class TestHasabTranslator:

    def setup_method(self):
        self.requests = []

    @pytest.mark.asyncio
    async def test_successful_translation(self):
        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return httpx.Response(200, json={"translated_text": "  ሰላም ዓለም  "})

        translator = _translator(handler)
        result = await translator.translate("hello world", "en", "am")

        assert result == "ሰላም ዓለም"
        request = self.requests[0]
        assert str(request.url) == API_URL
        assert request.headers["Authorization"] == "Bearer secret-key"
        assert json.loads(request.content) == {
            "text": "hello world",
            "source_language": "en",
            "target_language": "am",
        }
        await translator.aclose()

    @pytest.mark.asyncio
    async def test_accepts_translation_key(self):
        translator = _translator(lambda request: httpx.Response(200, json={"translation": "Akkam"}))

        assert await translator.translate("hello", "en", "om") == "Akkam"
        await translator.aclose()

    @pytest.mark.asyncio
    async def test_missing_api_key_skips_request(self):
        translator = _translator(lambda request: self.requests.append(request), api_key="")

        with pytest.raises(TranslationDegradedError):
            await translator.translate("hello", "en", "am")
        assert self.requests == []

    @pytest.mark.asyncio
    async def test_timeout_is_degraded(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        translator = _translator(handler)
        with pytest.raises(TranslationDegradedError) as exc_info:
            await translator.translate("hello", "en", "am")
        assert exc_info.value.strategy == "hasab"

    @pytest.mark.asyncio
    async def test_unauthorized_is_degraded(self):
        translator = _translator(lambda request: httpx.Response(401, json={"error": "invalid key"}))

        with pytest.raises(TranslationDegradedError) as exc_info:
            await translator.translate("hello", "en", "am")
        assert exc_info.value.context["status_code"] == 401

    @pytest.mark.asyncio
    async def test_redirect_is_degraded(self):
        translator = _translator(
            lambda request: httpx.Response(
                302,
                json={"translated_text": "hijacked"},
                headers={"Location": "https://elsewhere.test/"},
            )
        )

        with pytest.raises(TranslationDegradedError) as exc_info:
            await translator.translate("hello", "en", "am")
        assert exc_info.value.context["status_code"] == 302

    @pytest.mark.asyncio
    async def test_redirect_falls_back_to_original_text(self):
        service = TranslationService([
            _translator(lambda request: httpx.Response(302, json={"translated_text": "hijacked"})),
        ])

        assert await service.translate("hello", "en", "am") == "hello"

    @pytest.mark.asyncio
    async def test_malformed_body_is_degraded(self):
        translator = _translator(lambda request: httpx.Response(200, text="<html>gateway</html>"))

        with pytest.raises(TranslationDegradedError):
            await translator.translate("hello", "en", "am")

    @pytest.mark.asyncio
    async def test_body_without_text_is_degraded(self):
        translator = _translator(lambda request: httpx.Response(200, json={"status": "ok"}))

        with pytest.raises(TranslationDegradedError):
            await translator.translate("hello", "en", "am")


class TestTranslationService:

    def setup_method(self):
        self.provider_calls = 0

    def _counting(self, response: httpx.Response):
        def handler(request: httpx.Request) -> httpx.Response:
            self.provider_calls += 1
            return response
        return handler

    @pytest.mark.asyncio
    async def test_same_language_makes_no_calls(self, fake_llm):
        service = TranslationService([
            _translator(self._counting(httpx.Response(200, json={"translated_text": "x"}))),
            ModelTranslator(fake_llm),
        ])

        result = await service.translate("hello", "en", "en")

        assert result == "hello"
        assert self.provider_calls == 0
        fake_llm.translate.assert_not_called()

    @pytest.mark.asyncio
    async def test_blank_text_makes_no_calls(self, fake_llm):
        service = TranslationService([ModelTranslator(fake_llm)])

        assert await service.translate("   ", "am", "en") == "   "
        fake_llm.translate.assert_not_called()

    @pytest.mark.asyncio
    async def test_primary_success_skips_model(self, fake_llm):
        service = TranslationService([
            _translator(self._counting(httpx.Response(200, json={"translated_text": "ሰላም"}))),
            ModelTranslator(fake_llm),
        ])

        assert await service.translate("hello", "en", "am") == "ሰላም"
        assert self.provider_calls == 1
        fake_llm.translate.assert_not_called()

    @pytest.mark.asyncio
    async def test_primary_failure_falls_through_to_model(self, fake_llm):
        fake_llm.translate.return_value = "ሰላም (model)"
        service = TranslationService([
            _translator(self._counting(httpx.Response(503, text="unavailable"))),
            ModelTranslator(fake_llm),
        ])

        result = await service.translate("hello", "en", "am")

        assert result == "ሰላም (model)"
        assert self.provider_calls == 1
        fake_llm.translate.assert_awaited_once_with("hello", "en", "am")

    @pytest.mark.asyncio
    async def test_all_strategies_fail_returns_original(self, fake_llm):
        fake_llm.translate.side_effect = UpstreamGenerationError()

        def timeout(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("no route", request=request)

        service = TranslationService([_translator(timeout), ModelTranslator(fake_llm)])

        result = await service.translate("Selam, how are you?", "am", "en")

        assert result == "Selam, how are you?"
        fake_llm.translate.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_strategy_result_moves_on(self, fake_llm):
        fake_llm.translate.return_value = "   "
        service = TranslationService([ModelTranslator(fake_llm)])

        assert await service.translate("hello", "en", "so") == "hello"

    @pytest.mark.asyncio
    async def test_accepts_language_tags(self, fake_llm):
        from promptmaster.languages import LanguageTag

        fake_llm.translate.return_value = "مرحبا"
        service = TranslationService([ModelTranslator(fake_llm)])

        result = await service.translate("hello", LanguageTag.ENGLISH, LanguageTag.ARABIC)

        assert result == "مرحبا"
        fake_llm.translate.assert_awaited_once_with("hello", "en", "ar")
