"""
PromptMaster Backend - Gemini Service Unit Tests (Mocked)
=========================================================

What:  GeminiService with the google-generativeai module patched out.

What we test:
    ✅ generate / improve / transcribe / translate happy paths
    ✅ Missing API key → ConfigurationError, no SDK call
    ✅ ResourceExhausted → UpstreamRateLimitError
    ✅ Other SDK failures and empty completions → UpstreamGenerationError
    ✅ Empty transcript → TranscriptionError
    ❌ Real API calls
"""

from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import pytest
from google.api_core import exceptions as google_exceptions

from promptmaster.config import settings
from promptmaster.exceptions import (
    ConfigurationError,
    TranscriptionError,
    UpstreamGenerationError,
    UpstreamRateLimitError,
)
from promptmaster.services.gemini_service import GeminiService
from promptmaster.services.response_decoder import DecodeKind


def _response(text):
    response = MagicMock()
    response.text = text
    return response


class TestGeminiServiceMocked:

    def setup_method(self):
        self.mock_model = MagicMock()
        self.mock_model.generate_content_async = AsyncMock()

    def _service(self, mock_genai):
        mock_genai.GenerativeModel.return_value = self.mock_model
        return GeminiService(model_name="gemini-test")

    @pytest.mark.asyncio
    async def test_generate_returns_completion(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            self.mock_model.generate_content_async.return_value = _response("Photosynthesis turns light into sugar.")
            service = self._service(mock_genai)

            result = await service.generate("What is photosynthesis?")

            assert result == "Photosynthesis turns light into sugar."
            prompt = self.mock_model.generate_content_async.call_args.args[0]
            assert "User Query: What is photosynthesis?" in prompt
            assert "practical and actionable" in prompt
            mock_genai.configure.assert_called_once_with(api_key=settings.gemini_api_key)

    @pytest.mark.asyncio
    async def test_model_is_configured_once(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            self.mock_model.generate_content_async.return_value = _response("ok")
            service = self._service(mock_genai)

            await service.generate("one")
            await service.generate("two")

            assert mock_genai.GenerativeModel.call_count == 1

    @pytest.mark.asyncio
    async def test_improve_decodes_structured_json(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            self.mock_model.generate_content_async.return_value = _response(
                '```json\n{"critique": "Too short.", "improvedPrompt": "Explain X to a beginner."}\n```'
            )
            service = self._service(mock_genai)

            result = await service.improve("explain x")

            assert result.kind is DecodeKind.STRUCTURED
            assert result.critique == "Too short."
            assert result.improved_prompt == "Explain X to a beginner."

    @pytest.mark.asyncio
    async def test_improve_malformed_response_falls_back_to_raw(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            self.mock_model.generate_content_async.return_value = _response("Just a better prompt, no JSON")
            service = self._service(mock_genai)

            result = await service.improve("explain x")

            assert result.kind is DecodeKind.RAW
            assert result.improved_prompt == "Just a better prompt, no JSON"
            assert result.critique == "Automated improvement."

    @pytest.mark.asyncio
    async def test_missing_api_key_raises_configuration_error(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai, \
                patch.object(settings, "gemini_api_key", ""):
            service = self._service(mock_genai)

            with pytest.raises(ConfigurationError) as exc_info:
                await service.generate("hello")

            assert exc_info.value.setting == "GEMINI_API_KEY"
            self.mock_model.generate_content_async.assert_not_called()

    @pytest.mark.asyncio
    async def test_resource_exhausted_maps_to_rate_limit(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            self.mock_model.generate_content_async.side_effect = google_exceptions.ResourceExhausted("quota")
            service = self._service(mock_genai)

            with pytest.raises(UpstreamRateLimitError):
                await service.improve("hello")

    @pytest.mark.asyncio
    async def test_sdk_failure_maps_to_generation_error(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            self.mock_model.generate_content_async.side_effect = RuntimeError("connection reset")
            service = self._service(mock_genai)

            with pytest.raises(UpstreamGenerationError) as exc_info:
                await service.generate("hello")

            assert exc_info.value.context["error_type"] == "RuntimeError"

    @pytest.mark.asyncio
    async def test_empty_completion_is_generation_error(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            self.mock_model.generate_content_async.return_value = _response("   ")
            service = self._service(mock_genai)

            with pytest.raises(UpstreamGenerationError):
                await service.generate("hello")

    @pytest.mark.asyncio
    async def test_blocked_candidate_is_generation_error(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            blocked = MagicMock()
            type(blocked).text = PropertyMock(side_effect=ValueError("no parts"))
            self.mock_model.generate_content_async.return_value = blocked
            service = self._service(mock_genai)

            with pytest.raises(UpstreamGenerationError):
                await service.improve("hello")

    @pytest.mark.asyncio
    async def test_transcribe_sends_inline_audio(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            self.mock_model.generate_content_async.return_value = _response("  selam, how are you  ")
            service = self._service(mock_genai)

            result = await service.transcribe(b"\x00\x01audio", "audio/mp4")

            assert result == "selam, how are you"
            contents = self.mock_model.generate_content_async.call_args.args[0]
            assert contents[0] == {"mime_type": "audio/mp4", "data": b"\x00\x01audio"}
            assert "Return ONLY the text" in contents[1]

    @pytest.mark.asyncio
    async def test_empty_transcript_raises_transcription_error(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            self.mock_model.generate_content_async.return_value = _response("")
            service = self._service(mock_genai)

            with pytest.raises(TranscriptionError):
                await service.transcribe(b"silence", "audio/wav")

    @pytest.mark.asyncio
    async def test_translate_names_both_languages(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            self.mock_model.generate_content_async.return_value = _response("ሰላም")
            service = self._service(mock_genai)

            result = await service.translate("hello", "en", "am")

            assert result == "ሰላም"
            prompt = self.mock_model.generate_content_async.call_args.args[0]
            assert "from English to Amharic" in prompt

    @pytest.mark.asyncio
    async def test_health_check_returns_bool(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            model_entry = MagicMock()
            model_entry.name = "models/gemini-test"
            mock_genai.list_models.return_value = [model_entry]
            service = self._service(mock_genai)

            assert await service.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_swallows_errors(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai:
            mock_genai.list_models.side_effect = RuntimeError("network down")
            service = self._service(mock_genai)

            assert await service.health_check() is False

    @pytest.mark.asyncio
    async def test_health_check_without_key(self):
        with patch("promptmaster.services.gemini_service.genai") as mock_genai, \
                patch.object(settings, "gemini_api_key", ""):
            service = self._service(mock_genai)

            assert await service.health_check() is False
            mock_genai.list_models.assert_not_called()
