from __future__ import annotations

from typing import Any, Dict
from pocketflow import AsyncNode

from ashadidi.runtime.classify import detect_intent, map_intent_to_category


class IntentNode(AsyncNode):
    """Tag a non-emergency turn with intent and analytics category."""

    async def prep_async(self, shared: Dict[str, Any]) -> str:
        return str(shared.get("user_text") or "")

    async def exec_async(self, text: str) -> Dict[str, str]:
        intent = detect_intent(text)
        return {"intent": intent, "category": map_intent_to_category(intent)}

    async def post_async(self, shared: Dict[str, Any], prep: str, exec_res: Dict[str, str]) -> str:
        shared["intent"] = exec_res["intent"]
        shared["category"] = exec_res["category"]
        return "ok"
