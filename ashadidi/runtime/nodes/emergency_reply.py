# ashadidi/runtime/nodes/emergency_reply.py
from __future__ import annotations
from typing import Any, Dict, Mapping
from pocketflow import AsyncNode

from ashadidi.runtime.classify import normalize_language
from ashadidi.runtime.lexicon import EMERGENCY_MESSAGES, EMERGENCY_TAG


class EmergencyReplyNode(AsyncNode):
    """Triggered when triage detects an emergency.
    Prep: resolve language
    Exec: pick the canned message (pure, no model call)
    Post: commit to shared + route
    """

    def __init__(self, messages: Mapping[str, str] | None = None, **kwargs):
        super().__init__(**kwargs)
        self.messages = messages or EMERGENCY_MESSAGES

    async def prep_async(self, shared: Dict[str, Any]) -> str:
        return normalize_language(shared.get("language"))

    async def exec_async(self, language: str) -> Dict[str, Any]:
        return {"reply": self.messages[language]}

    async def post_async(self, shared: Dict[str, Any], prep: str, exec_res: Dict[str, Any]) -> str:
        shared["assistant_reply"] = exec_res["reply"]
        shared["is_emergency"] = True
        shared["intent"] = EMERGENCY_TAG
        shared["category"] = EMERGENCY_TAG
        return "ok"
