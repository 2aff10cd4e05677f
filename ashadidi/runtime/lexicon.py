# ashadidi/runtime/lexicon.py
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

SUPPORTED_LANGUAGES: Tuple[str, ...] = ("hi", "en")
DEFAULT_LANGUAGE = "hi"

# Substring triggers, matched against lowercased text.
EMERGENCY_PHRASES: Tuple[str, ...] = (
    # Hindi / transliterated
    "खून", "bleeding", "बहुत दर्द", "तेज़ दर्द", "severe pain",
    "behosh", "बेहोश", "unconscious", "chakkar", "चक्कर", "dizzy",
    "bukhar", "बुखार", "fever", "emergency", "इमरजेंसी",
    "help", "मदद", "bachao", "बचाओ", "jaldi", "जल्दी",
    "hospital", "अस्पताल", "doctor", "डॉक्टर",
    # Danger signs
    "baby not moving", "बच्चा नहीं हिल रहा", "convulsion", "दौरा",
    "water broke", "पानी टूट गया", "labour", "प्रसव पीड़ा",
    "heavy bleeding", "ज्यादा खून", "can't breathe", "सांस नहीं आ रही",
)

# Order matters: first match wins.
INTENT_LEXICON: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("menstrual_query", ("period", "mahina", "माहवारी", "mc")),
    ("pregnancy_query", ("pregnant", "garbh", "गर्भ", "baby")),
    ("nutrition_query", ("food", "khana", "खाना", "diet", "iron")),
    ("mental_health_query", ("sad", "udas", "उदास", "tension", "stress")),
    ("scheme_query", ("scheme", "yojana", "योजना", "benefit")),
    ("ifa_query", ("ifa", "tablet", "goli", "गोली")),
)

GENERAL_INTENT = "general_query"
GENERAL_CATEGORY = "general"
EMERGENCY_TAG = "emergency"

CATEGORY_BY_INTENT: Mapping[str, str] = MappingProxyType({
    "menstrual_query": "menstrual_health",
    "pregnancy_query": "pregnancy",
    "nutrition_query": "nutrition",
    "mental_health_query": "mental_health",
    "scheme_query": "schemes",
    "ifa_query": "nutrition",
    GENERAL_INTENT: GENERAL_CATEGORY,
})

EMERGENCY_MESSAGES: Mapping[str, str] = MappingProxyType({
    "hi": "यह गंभीर लग रहा है। कृपया तुरंत Red Zone बटन दबाएं या अपनी ASHA दीदी को बुलाएं। क्या आप ठीक हैं?",
    "en": "This sounds serious. Please press the Red Zone button immediately or call your ASHA worker. Are you okay?",
})

FALLBACK_MESSAGES: Mapping[str, str] = MappingProxyType({
    "hi": "माफ़ करें, अभी कुछ तकनीकी समस्या है। कृपया थोड़ी देर बाद कोशिश करें।",
    "en": "Sorry, there is a technical issue. Please try again later.",
})

EMPTY_REPLY_MESSAGES: Mapping[str, str] = MappingProxyType({
    "hi": "माफ़ करें, कुछ गड़बड़ हो गई। कृपया फिर से कोशिश करें।",
    "en": "Sorry, something went wrong. Please try again.",
})

RISK_FALLBACK_RECOMMENDATION = "Unable to assess. Please consult your ASHA worker."

VISIT_FOLLOW_UP_QUESTIONS: Mapping[str, str] = MappingProxyType({
    "patient_name": "कृपया मरीज़ का नाम बताएं।",
    "vitals": "कृपया BP, वज़न या तापमान बताएं।",
    "visit_type": "यह कौन सी विज़िट है - routine checkup, follow up, या emergency?",
})


def _check_tables() -> None:
    if not EMERGENCY_PHRASES:
        raise RuntimeError("emergency lexicon must not be empty")
    for name, table in (
        ("EMERGENCY_MESSAGES", EMERGENCY_MESSAGES),
        ("FALLBACK_MESSAGES", FALLBACK_MESSAGES),
        ("EMPTY_REPLY_MESSAGES", EMPTY_REPLY_MESSAGES),
    ):
        missing = [lang for lang in SUPPORTED_LANGUAGES if not table.get(lang)]
        if missing:
            raise RuntimeError(f"{name} is missing languages: {missing}")


_check_tables()
