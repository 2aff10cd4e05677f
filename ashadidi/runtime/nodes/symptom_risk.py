# ashadidi/runtime/nodes/symptom_risk.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from pocketflow import AsyncNode

from ashadidi.runtime.json_extract import parse_json_object
from ashadidi.schemas.risk import RiskAssessment, coerce_risk_assessment

logger = logging.getLogger(__name__)

RED_FLAG_CONDITIONS = (
    "Heavy vaginal bleeding",
    "Severe abdominal pain",
    "High fever (>38°C)",
    "Severe headache with vision problems",
    "Seizures or convulsions",
    "Decreased or no fetal movement (after 20 weeks)",
    "Water breaking before 37 weeks",
    "Signs of preeclampsia (swelling, headache, vision changes)",
)


def pregnancy_context(is_pregnant: bool, pregnancy_week: Optional[int]) -> str:
    if not is_pregnant:
        return "Patient is not currently pregnant."
    week = pregnancy_week if pregnancy_week else "unknown"
    return f"Patient is pregnant (week {week})."


def build_risk_prompt(is_pregnant: bool, pregnancy_week: Optional[int]) -> str:
    conditions = "\n".join(f"- {c}" for c in RED_FLAG_CONDITIONS)
    return (
        "You are a maternal health risk assessment assistant. Analyze the following "
        "symptoms and determine if they indicate a red flag condition.\n\n"
        f"{pregnancy_context(is_pregnant, pregnancy_week)}\n\n"
        f"Red flag conditions include:\n{conditions}\n\n"
        "Return ONLY a JSON object with:\n"
        "- isRedFlag: boolean\n"
        "- riskScore: number (0-100)\n"
        "- recommendation: string (in simple language)\n"
        "- reasons: array of strings explaining the assessment"
    )


class SymptomRiskNode(AsyncNode):
    """Single-shot red-flag assessment. Any failure yields RiskAssessment.fallback()."""

    def __init__(self, *, temperature: float = 0.2, max_tokens: int = 300, **kwargs) -> None:
        super().__init__(**kwargs)
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def prep_async(self, shared: Dict[str, Any]) -> Dict[str, Any]:
        symptoms: List[str] = [str(s) for s in shared.get("symptoms") or []]
        return {
            "messages": [
                {
                    "role": "system",
                    "content": build_risk_prompt(
                        bool(shared.get("is_pregnant")), shared.get("pregnancy_week")
                    ),
                },
                {"role": "user", "content": "Symptoms: " + ", ".join(symptoms)},
            ],
            "client": shared["llm_client"],
        }

    async def exec_async(self, prep: Dict[str, Any]) -> Dict[str, Any]:
        raw = await prep["client"].chat(
            messages=prep["messages"],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return {"raw": raw if isinstance(raw, str) else ""}

    async def exec_fallback_async(self, prep: Dict[str, Any], exc: Exception) -> Dict[str, Any]:
        logger.error("Symptom analysis failed: %s", exc)
        return {"raw": "", "error": str(exc), "degraded": True}

    async def post_async(self, shared: Dict[str, Any], prep: Dict[str, Any], exec_res: Dict[str, Any]) -> str:
        parsed = parse_json_object(exec_res["raw"]) if exec_res["raw"] else None
        assessment: RiskAssessment = coerce_risk_assessment(parsed)
        shared["risk_assessment"] = assessment
        shared["degraded"] = bool(exec_res.get("degraded")) or parsed is None
        return "ok"
