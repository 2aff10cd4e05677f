# ashadidi/runtime/nodes/visit_extract.py
from __future__ import annotations

import logging
from typing import Any, Dict
from pocketflow import AsyncNode

from ashadidi.runtime.json_extract import parse_json_object
from ashadidi.schemas.visit import coerce_visit_record

logger = logging.getLogger(__name__)

_RECORD_SHAPE = """{
  "patient_name": string | null,
  "visit_type": "routine_checkup" | "emergency" | "follow_up" | null,
  "vitals": {
    "blood_pressure": { "systolic": number, "diastolic": number } | null,
    "weight_kg": number | null,
    "temperature_celsius": number | null
  },
  "symptoms": string[],
  "symptom_severity": "mild" | "moderate" | "severe" | null,
  "services_provided": string[],
  "medicines_distributed": string[],
  "counseling_topics": string[],
  "observations": string | null,
  "concerns_noted": string | null,
  "follow_up_required": boolean,
  "next_visit_date": "YYYY-MM-DD" | null,
  "referral_needed": boolean,
  "referral_reason": string | null
}"""


def build_extraction_prompt(transcription: str) -> str:
    return (
        "You are a medical data extraction AI. Extract structured JSON from this "
        "ASHA worker's visit notes.\n\n"
        "RULES:\n"
        "- Output ONLY valid JSON, no markdown, no explanations\n"
        "- Use null for missing fields\n"
        "- Detect patient name from context\n"
        "- Extract vital signs, symptoms, and actions taken\n\n"
        f'VISIT NOTES: "{transcription}"\n\n'
        f"OUTPUT FORMAT:\n{_RECORD_SHAPE}"
    )


class VisitExtractNode(AsyncNode):
    """Turn a visit-note transcription into an ExtractedVisitRecord.

    The model output is carved and coerced in post_async, so a failed call
    and a garbage answer both end as a fully defaulted record.
    """

    def __init__(self, *, temperature: float = 0.3, max_tokens: int = 500, **kwargs) -> None:
        super().__init__(**kwargs)
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def prep_async(self, shared: Dict[str, Any]) -> Dict[str, Any]:
        transcription = str(shared.get("transcription") or "")
        return {
            "messages": [
                {"role": "system", "content": build_extraction_prompt(transcription)},
                {"role": "user", "content": transcription},
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
        logger.error("Visit data extraction failed: %s", exc)
        return {"raw": "", "error": str(exc), "degraded": True}

    async def post_async(self, shared: Dict[str, Any], prep: Dict[str, Any], exec_res: Dict[str, Any]) -> str:
        parsed = parse_json_object(exec_res["raw"]) if exec_res["raw"] else None
        shared["visit_record"] = coerce_visit_record(parsed)
        shared["degraded"] = bool(exec_res.get("degraded")) or parsed is None
        return "ok"
