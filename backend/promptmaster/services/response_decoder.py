"""
PromptMaster Backend - Improvement Response Decoder
===================================================

What:  Turns the model's answer to an "improve" request into a
       (critique, improved_prompt) pair without ever raising.
How:   1. Strip ```json / ``` fences and surrounding whitespace
       2. Try to parse a JSON object {"critique": ..., "improvedPrompt": ...}
       3. On any failure, keep the whole cleaned text as the improved prompt
          and attach a generic critique
Who:   GeminiService.improve() is the only caller.

The result is tagged (STRUCTURED or RAW) so callers and logs can tell a real
critique from the placeholder.
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)

DEFAULT_CRITIQUE = "Improved for better clarity and effectiveness."
FALLBACK_CRITIQUE = "Automated improvement."


class DecodeKind(str, Enum):
    STRUCTURED = "structured"
    RAW = "raw"


@dataclass(frozen=True)
class DecodedImprovement:
    kind: DecodeKind
    critique: str
    improved_prompt: str

    @property
    def is_structured(self) -> bool:
        return self.kind is DecodeKind.STRUCTURED


def strip_code_fences(raw: str) -> str:
    """Removes markdown code fences the model adds despite being told not to."""
    return FENCE_PATTERN.sub("", raw or "").strip()


def _text_field(payload: dict, key: str) -> str:
    value = payload.get(key)
    if isinstance(value, str):
        return value.strip()
    return ""


def decode_improvement(raw: str) -> DecodedImprovement:
    """
    Best-effort decode of an improve response.

    Returns:
        STRUCTURED when the cleaned text is a JSON object. A missing critique
        gets DEFAULT_CRITIQUE and a missing improvedPrompt falls back to the
        cleaned text.
        RAW otherwise: FALLBACK_CRITIQUE plus the cleaned text.
    """
    cleaned = strip_code_fences(raw)

    try:
        payload = json.loads(cleaned)
    except (json.JSONDecodeError, TypeError):
        logger.info("Improve response was not JSON (%d chars); using raw text", len(cleaned))
        return DecodedImprovement(DecodeKind.RAW, FALLBACK_CRITIQUE, cleaned)

    if not isinstance(payload, dict):
        logger.info("Improve response decoded to %s, not an object; using raw text", type(payload).__name__)
        return DecodedImprovement(DecodeKind.RAW, FALLBACK_CRITIQUE, cleaned)

    return DecodedImprovement(
        kind=DecodeKind.STRUCTURED,
        critique=_text_field(payload, "critique") or DEFAULT_CRITIQUE,
        improved_prompt=_text_field(payload, "improvedPrompt") or cleaned,
    )
