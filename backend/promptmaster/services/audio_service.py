"""
PromptMaster Backend - Voice Upload Validation Service
======================================================

What:  Validates voice-prompt uploads before they reach the transcription stage.
How:   Extension check, then size check (Content-Length first, actual bytes
       second), then the MIME type is derived from the extension.
Who:   Called by PromptService.improve_voice_prompt().
When:  Right after the multipart upload is read, before any model call.

Audio is never written to disk: the bytes go inline to the transcription
call and are dropped with the request.

Validation order (cheapest first):
    1. Extension   - no bytes inspected
    2. Size        - reported Content-Length, then actual length (empty files too)
    3. MIME type   - lookup table keyed by extension
"""

import logging
from pathlib import Path
from typing import Optional

from promptmaster.config import settings
from promptmaster.exceptions import ValidationError

logger = logging.getLogger(__name__)

# ── Allowed Audio Types ───────────────────────────────────────────────────
# Formats Gemini accepts as inline audio. Expo records .m4a by default.
AUDIO_MIME_TYPES = {
    ".m4a": "audio/mp4",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".aac": "audio/aac",
    ".ogg": "audio/ogg",
    ".webm": "audio/webm",
    ".flac": "audio/flac",
}

ALLOWED_EXTENSIONS = set(AUDIO_MIME_TYPES)


class AudioService:
    """Stateless validator for uploaded voice prompts."""

    def __init__(self, max_size: Optional[int] = None):
        self.max_size = max_size or settings.max_audio_size

    def validate_extension(self, filename: str) -> str:
        """
        Returns the normalized extension (lowercase with dot).

        Raises:
            ValidationError if the extension is missing or not an audio format we accept.
        """
        ext = Path(filename or "").suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"Audio type '{ext or 'unknown'}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="audio",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Rejects empty uploads and uploads above the configured maximum.

        The reported Content-Length is checked first; the actual byte count
        is checked too because clients may send a wrong header.
        """
        max_mb = self.max_size / (1024 * 1024)

        if content_length and content_length > self.max_size:
            raise ValidationError(
                message=f"Audio size exceeds maximum of {max_mb:.0f}MB. Please record a shorter clip.",
                field="audio",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size == 0:
            raise ValidationError(
                message="Audio file is empty. Please record again.",
                field="audio",
            )

        if actual_size > self.max_size:
            raise ValidationError(
                message=f"Audio size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="audio",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    @staticmethod
    def mime_type_for(extension: str) -> str:
        return AUDIO_MIME_TYPES[extension]

    def validate(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> str:
        """
        Full validation pipeline.

        Returns:
            MIME type to send alongside the audio bytes (e.g. "audio/mp4").

        Raises:
            ValidationError: bad extension, empty file or file too large
        """
        ext = self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        mime_type = self.mime_type_for(ext)

        logger.info("Audio upload accepted: %s (%d bytes, %s)", ext, len(content), mime_type)
        return mime_type


# ── Singleton Instance ────────────────────────────────────────────────────
audio_service = AudioService()
