from __future__ import annotations
import logging
from typing import Any, Callable, Dict
from pocketflow import AsyncNode

from ashadidi.runtime.classify import detect_emergency

logger = logging.getLogger(__name__)


class EmergencyTriageNode(AsyncNode):
    """Gate every chat turn on the emergency lexicon before any model call."""

    def __init__(self, detector: Callable[[str], bool] | None = None, **kwargs):
        super().__init__(**kwargs)
        self.detector = detector or detect_emergency

    async def prep_async(self, shared: Dict[str, Any]) -> str:
        return str(shared.get("user_text") or "")

    async def exec_async(self, text: str) -> Dict[str, Any]:
        # pure; no shared mutation here
        return {"level": "emergency" if self.detector(text) else "ok"}

    async def post_async(self, shared: Dict[str, Any], prep: str, exec_res: Dict[str, Any]) -> str:
        shared["is_emergency"] = exec_res["level"] == "emergency"
        if shared["is_emergency"]:
            logger.info("Emergency phrase detected; short-circuiting to canned reply")
        return exec_res["level"]  # "emergency" | "ok"
