from __future__ import annotations

from typing import Any, Dict, List
from pocketflow import AsyncNode

from ashadidi.runtime.lexicon import VISIT_FOLLOW_UP_QUESTIONS
from ashadidi.schemas.visit import ExtractedVisitRecord

TRACKED_FIELDS = 10


def missing_fields(record: ExtractedVisitRecord) -> List[str]:
    missing: List[str] = []
    if not record.patient_name:
        missing.append("patient_name")
    v = record.vitals
    if v.blood_pressure is None and v.weight_kg is None and v.temperature_celsius is None:
        missing.append("vitals")
    if not record.visit_type:
        missing.append("visit_type")
    return missing


def confidence_score(record: ExtractedVisitRecord) -> float:
    # the two booleans are always present on a coerced record and always count
    filled = [
        record.patient_name,
        record.visit_type,
        record.vitals.blood_pressure,
        record.vitals.weight_kg is not None,
        record.vitals.temperature_celsius is not None,
        bool(record.symptoms),
        bool(record.services_provided),
        record.observations,
        True,
        True,
    ]
    return round(sum(1 for f in filled if f) / TRACKED_FIELDS, 2)


class VisitCompletenessNode(AsyncNode):
    """Score an extracted record and pick the next question for the ASHA worker."""

    async def prep_async(self, shared: Dict[str, Any]) -> ExtractedVisitRecord:
        return shared.get("visit_record") or ExtractedVisitRecord.empty()

    async def exec_async(self, record: ExtractedVisitRecord) -> Dict[str, Any]:
        missing = missing_fields(record)
        return {
            "missing_fields": missing,
            "follow_up_question": VISIT_FOLLOW_UP_QUESTIONS.get(missing[0]) if missing else None,
            "confidence_score": confidence_score(record),
        }

    async def post_async(self, shared: Dict[str, Any], prep: ExtractedVisitRecord, exec_res: Dict[str, Any]) -> str:
        shared.update(exec_res)
        shared["is_complete"] = not exec_res["missing_fields"]
        return "ok"
