from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

VisitType = Literal["routine_checkup", "emergency", "follow_up"]
Severity = Literal["mild", "moderate", "severe"]

_VISIT_TYPES = ("routine_checkup", "emergency", "follow_up")
_SEVERITIES = ("mild", "moderate", "severe")


class BloodPressure(BaseModel):
    systolic: float
    diastolic: float


class Vitals(BaseModel):
    blood_pressure: Optional[BloodPressure] = None
    weight_kg: Optional[float] = None
    temperature_celsius: Optional[float] = None


class ExtractedVisitRecord(BaseModel):
    """Structured ASHA visit record. Every field always present."""

    patient_name: Optional[str] = None
    visit_type: Optional[VisitType] = None
    vitals: Vitals = Field(default_factory=Vitals)
    symptoms: List[str] = Field(default_factory=list)
    symptom_severity: Optional[Severity] = None
    services_provided: List[str] = Field(default_factory=list)
    medicines_distributed: List[str] = Field(default_factory=list)
    counseling_topics: List[str] = Field(default_factory=list)
    observations: Optional[str] = None
    concerns_noted: Optional[str] = None
    follow_up_required: bool = False
    next_visit_date: Optional[str] = None
    referral_needed: bool = False
    referral_reason: Optional[str] = None

    @classmethod
    def empty(cls) -> "ExtractedVisitRecord":
        return cls()


class VisitProcessIn(BaseModel):
    transcription: str

    @field_validator("transcription")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("No speech detected or transcription is empty")
        return v


class VisitProcessingResult(BaseModel):
    success: bool = True
    transcription: str
    extracted_data: ExtractedVisitRecord
    confidence_score: float
    missing_fields: List[str] = Field(default_factory=list)
    follow_up_question: Optional[str] = None
    is_complete: bool = False


# ---------------------------
# Coercion of raw model output
# ---------------------------
def _str_or_none(v: Any) -> Optional[str]:
    if isinstance(v, str) and v.strip():
        return v.strip()
    return None


def _num_or_none(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v)
    return None


def _str_list(v: Any) -> List[str]:
    if not isinstance(v, list):
        return []
    return [x.strip() for x in v if isinstance(x, str) and x.strip()]


def _choice(v: Any, allowed: tuple) -> Optional[str]:
    return v if isinstance(v, str) and v in allowed else None


def _blood_pressure(v: Any) -> Optional[BloodPressure]:
    if not isinstance(v, dict):
        return None
    systolic = _num_or_none(v.get("systolic"))
    diastolic = _num_or_none(v.get("diastolic"))
    if systolic is None or diastolic is None:
        return None
    return BloodPressure(systolic=systolic, diastolic=diastolic)


def _vitals(v: Any) -> Vitals:
    if not isinstance(v, dict):
        return Vitals()
    return Vitals(
        blood_pressure=_blood_pressure(v.get("blood_pressure")),
        weight_kg=_num_or_none(v.get("weight_kg")),
        temperature_celsius=_num_or_none(v.get("temperature_celsius")),
    )


def coerce_visit_record(raw: Optional[Dict[str, Any]]) -> ExtractedVisitRecord:
    """Build a fully-shaped record from whatever the model returned.

    Missing or wrong-typed fields fall back to their defaults; never raises.
    """
    if not isinstance(raw, dict):
        return ExtractedVisitRecord.empty()
    return ExtractedVisitRecord(
        patient_name=_str_or_none(raw.get("patient_name")),
        visit_type=_choice(raw.get("visit_type"), _VISIT_TYPES),
        vitals=_vitals(raw.get("vitals")),
        symptoms=_str_list(raw.get("symptoms")),
        symptom_severity=_choice(raw.get("symptom_severity"), _SEVERITIES),
        services_provided=_str_list(raw.get("services_provided")),
        medicines_distributed=_str_list(raw.get("medicines_distributed")),
        counseling_topics=_str_list(raw.get("counseling_topics")),
        observations=_str_or_none(raw.get("observations")),
        concerns_noted=_str_or_none(raw.get("concerns_noted")),
        follow_up_required=raw.get("follow_up_required") is True,
        next_visit_date=_str_or_none(raw.get("next_visit_date")),
        referral_needed=raw.get("referral_needed") is True,
        referral_reason=_str_or_none(raw.get("referral_reason")),
    )
