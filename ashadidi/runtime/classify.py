# ashadidi/runtime/classify.py
from __future__ import annotations

from typing import Optional

from ashadidi.runtime.lexicon import (
    CATEGORY_BY_INTENT,
    DEFAULT_LANGUAGE,
    EMERGENCY_PHRASES,
    GENERAL_CATEGORY,
    GENERAL_INTENT,
    INTENT_LEXICON,
)


def _normalize(s: Optional[str]) -> str:
    return (s or "").lower()


def detect_emergency(text: Optional[str]) -> bool:
    """True if any emergency phrase appears anywhere in the text.

    Plain substring matching, no word boundaries: "chakkar" inside a longer
    word still triggers.
    """
    lowered = _normalize(text)
    if not lowered:
        return False
    return any(phrase in lowered for phrase in EMERGENCY_PHRASES)


def detect_intent(text: Optional[str]) -> str:
    lowered = _normalize(text)
    for intent, phrases in INTENT_LEXICON:
        if any(p in lowered for p in phrases):
            return intent
    return GENERAL_INTENT


def map_intent_to_category(intent: Optional[str]) -> str:
    return CATEGORY_BY_INTENT.get(intent or "", GENERAL_CATEGORY)


def normalize_language(language: Optional[str]) -> str:
    return "en" if (language or "").strip().lower() == "en" else DEFAULT_LANGUAGE
