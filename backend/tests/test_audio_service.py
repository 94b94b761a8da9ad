"""
PromptMaster Backend - Audio Upload Validation Tests
====================================================

What:  AudioService extension, size and MIME checks.

What we test:
    ✅ Accepted formats map to the MIME type sent with the audio
    ✅ Unsupported and missing extensions are rejected
    ✅ Empty files are rejected
    ✅ Oversized uploads are rejected by Content-Length and by actual size
"""

import pytest

from promptmaster.exceptions import ValidationError
from promptmaster.services.audio_service import ALLOWED_EXTENSIONS, AudioService


class TestAudioService:

    def setup_method(self):
        self.service = AudioService(max_size=1024)

    @pytest.mark.parametrize("filename,mime_type", [
        ("recording.m4a", "audio/mp4"),
        ("memo.mp3", "audio/mpeg"),
        ("clip.wav", "audio/wav"),
        ("VOICE.OGG", "audio/ogg"),
    ])
    def test_valid_audio_returns_mime_type(self, filename, mime_type):
        assert self.service.validate(filename, b"\x00" * 100) == mime_type

    @pytest.mark.parametrize("filename", ["notes.txt", "image.png", "recording", ""])
    def test_unsupported_extension(self, filename):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_extension(filename)
        assert exc_info.value.field == "audio"

    def test_error_lists_allowed_types(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate("virus.exe", b"MZ")
        assert exc_info.value.context["allowed"] == sorted(ALLOWED_EXTENSIONS)

    def test_empty_file(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate("recording.m4a", b"")
        assert "empty" in exc_info.value.message

    def test_reported_length_too_large(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate("recording.m4a", b"\x00" * 10, content_length=4096)
        assert exc_info.value.context["reported_size"] == 4096

    def test_actual_size_too_large(self):
        # Client under-reports Content-Length
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate("recording.m4a", b"\x00" * 2048, content_length=100)
        assert exc_info.value.context["actual_size"] == 2048

    def test_size_at_limit_is_accepted(self):
        assert self.service.validate("recording.m4a", b"\x00" * 1024, content_length=1024) == "audio/mp4"
