"""
PromptMaster Backend - Supported Languages
==========================================

What:  The closed set of language tags the API accepts, their display names,
       and the rule for when a translation hop is needed.
How:   `LanguageTag` is a `str` enum so it validates in Pydantic schemas and
       compares equal to plain strings ("am" == LanguageTag.AMHARIC).

English is the working language: every prompt is generated or improved in
English and translated back afterwards.
"""

from enum import Enum
from typing import Dict, List


class LanguageTag(str, Enum):
    ENGLISH = "en"
    AMHARIC = "am"
    AFAAN_OROMO = "om"
    TIGRINYA = "ti"
    SOMALI = "so"
    ARABIC = "ar"


WORKING_LANGUAGE = LanguageTag.ENGLISH

SUPPORTED_LANGUAGES: Dict[str, str] = {
    LanguageTag.ENGLISH.value: "English",
    LanguageTag.AMHARIC.value: "Amharic",
    LanguageTag.AFAAN_OROMO.value: "Afaan Oromo",
    LanguageTag.TIGRINYA.value: "Tigrinya",
    LanguageTag.SOMALI.value: "Somali",
    LanguageTag.ARABIC.value: "Arabic",
}


def tag_value(language) -> str:
    """Normalize a LanguageTag or raw string to its two-letter code."""
    if isinstance(language, LanguageTag):
        return language.value
    return str(language).strip().lower()


def display_name(language) -> str:
    """Human-readable name used inside model instructions ("am" → "Amharic")."""
    code = tag_value(language)
    return SUPPORTED_LANGUAGES.get(code, code)


def needs_translation(source, target) -> bool:
    """A hop is needed only when source and target differ."""
    return tag_value(source) != tag_value(target)


def list_languages() -> List[Dict[str, str]]:
    return [{"code": code, "name": name} for code, name in SUPPORTED_LANGUAGES.items()]
