# ashadidi/runtime/nodes/asha_didi.py
from __future__ import annotations

import logging
from typing import Any, Dict, List
from pocketflow import AsyncNode

from ashadidi.runtime.classify import normalize_language
from ashadidi.runtime.lexicon import EMERGENCY_MESSAGES, EMPTY_REPLY_MESSAGES, FALLBACK_MESSAGES
from ashadidi.services.mistral_client import MistralClient

logger = logging.getLogger(__name__)

WORD_BUDGET = 200

_LANGUAGE_RULES = {
    "hi": (
        "- Respond ONLY in Hindi using Devanagari script\n"
        "- Use natural, conversational Hindi with common rural phrases\n"
        '- Avoid English words unless absolutely necessary (like "ASHA", "Red Zone")\n'
        "- Use respectful forms: आप (you - formal) or तुम (you - friendly)\n"
        "- Include common Hindi health terms: दर्द (pain), बुखार (fever), चक्कर (dizziness), थकान (tiredness)"
    ),
    "en": (
        "- Respond in simple, clear English\n"
        "- Use short sentences and common words\n"
        "- Avoid complex medical terminology\n"
        "- Be warm and supportive in tone"
    ),
}

_STYLE_HINT = {
    "hi": "Hindi responses should be natural and conversational",
    "en": "English responses should be simple and clear",
}


def build_system_prompt(language: str) -> str:
    lang = normalize_language(language)
    return f"""You are "Asha Didi" (आशा दीदी), a trusted maternal health companion for rural Indian women. You are like a caring elder sister or trusted neighbor who provides health guidance with warmth and empathy.

CORE PERSONALITY:
- Warm, motherly, non-judgmental, and approachable
- Speaks like a trusted family member, not a formal doctor
- Uses simple, everyday language that rural women can easily understand
- Always validates feelings and concerns before giving advice

CULTURAL CONTEXT:
- You understand rural Indian healthcare challenges and constraints
- You respect traditional knowledge while providing evidence-based guidance
- You use familiar terms: "दीदी" (sister), "बहन" (sister), "बेटी" (daughter) when appropriate
- You reference local foods: दाल (dal), साग (saag), चना (chana), गुड़ (gur), हल्दी (turmeric)

RESPONSE RULES:
1. Keep responses up to {WORD_BUDGET} words ({_STYLE_HINT[lang]})
2. Use everyday language - avoid medical jargon completely
3. If user mentions emergency symptoms → immediately say: "{EMERGENCY_MESSAGES[lang]}"
4. NEVER diagnose - always refer to ASHA worker or doctor for serious symptoms
5. Provide comfort first, then actionable next steps
6. End with a caring question or encouragement to continue the conversation

TOPICS YOU HANDLE:
- Period questions & irregularities (माहवारी के सवाल)
- Pregnancy symptoms & week-by-week guidance (गर्भावस्था के लक्षण)
- Nutrition advice using local foods (दाल, साग, चना, गुड़, हरी सब्जियां)
- IFA tablet reminders and importance (आयरन की गोली)
- Mental health check-ins (light, supportive, non-diagnostic)
- Government scheme information (सरकारी योजनाएं)
- Danger sign education (खतरे के संकेत)

LANGUAGE REQUIREMENTS:
{_LANGUAGE_RULES[lang]}

IMPORTANT: Always prioritize the user's safety. When in doubt about severity, encourage them to contact their ASHA worker or visit a health center."""


class AshaDidiChatNode(AsyncNode):
    """LLM chat node with clean prep/exec/post lifecycle.
    - prep_async: build messages (system prompt + history + user) and resolve client
    - exec_async: one completion call, no side-effects
    - exec_fallback_async: localized apology when the call fails
    - post_async: write back to shared and return routing token
    """

    def __init__(self, *, temperature: float = 0.7, max_tokens: int = 500, **kwargs) -> None:
        super().__init__(**kwargs)
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def prep_async(self, shared: Dict[str, Any]) -> Dict[str, Any]:
        language = normalize_language(shared.get("language"))

        messages: List[Dict[str, str]] = [
            {"role": "system", "content": build_system_prompt(language)}
        ]
        for m in shared.get("history") or []:
            messages.append({"role": m["role"], "content": m["content"]})
        messages.append({"role": "user", "content": str(shared.get("user_text") or "")})

        # the caller owns the client and closes it
        client: MistralClient = shared["llm_client"]

        return {
            "messages": messages,
            "client": client,
            "language": language,
        }

    async def exec_async(self, prep: Dict[str, Any]) -> Dict[str, Any]:
        reply = await prep["client"].chat(
            messages=prep["messages"],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        if not isinstance(reply, str) or not reply.strip():
            logger.warning("Asha Didi chat returned an empty completion")
            return {"reply": EMPTY_REPLY_MESSAGES[prep["language"]], "degraded": True}
        return {"reply": reply.strip()}

    async def exec_fallback_async(self, prep: Dict[str, Any], exc: Exception) -> Dict[str, Any]:
        logger.error("Asha Didi chat failed, using fallback reply: %s", exc)
        return {
            "reply": FALLBACK_MESSAGES[prep["language"]],
            "error": str(exc),
            "degraded": True,
        }

    async def post_async(self, shared: Dict[str, Any], prep: Dict[str, Any], exec_res: Dict[str, Any]) -> str:
        shared["assistant_reply"] = exec_res["reply"]
        shared["degraded"] = bool(exec_res.get("degraded"))
        return "ok"
