from ashadidi.schemas.risk import RiskAssessment, coerce_risk_assessment
from ashadidi.schemas.visit import ExtractedVisitRecord, coerce_visit_record

EXPECTED_FIELDS = {
    "patient_name", "visit_type", "vitals", "symptoms", "symptom_severity",
    "services_provided", "medicines_distributed", "counseling_topics",
    "observations", "concerns_noted", "follow_up_required", "next_visit_date",
    "referral_needed", "referral_reason",
}


def test_empty_record_shape():
    dumped = ExtractedVisitRecord.empty().model_dump()
    assert set(dumped) == EXPECTED_FIELDS
    assert dumped["vitals"] == {"blood_pressure": None, "weight_kg": None, "temperature_celsius": None}
    assert dumped["symptoms"] == []
    assert dumped["follow_up_required"] is False
    assert dumped["referral_needed"] is False
    assert dumped["patient_name"] is None


def test_coerce_none_and_non_dict():
    assert coerce_visit_record(None) == ExtractedVisitRecord.empty()
    assert coerce_visit_record(["a"]) == ExtractedVisitRecord.empty()  # type: ignore[arg-type]


def test_coerce_wrong_types_fall_back_to_defaults():
    record = coerce_visit_record({
        "patient_name": 42,
        "visit_type": "house_party",
        "vitals": {"blood_pressure": {"systolic": "120", "diastolic": 80}, "weight_kg": True, "temperature_celsius": 37.5},
        "symptoms": "headache",
        "symptom_severity": "SEVERE",
        "services_provided": ["BP check", 7, ""],
        "follow_up_required": "yes",
        "referral_needed": True,
        "referral_reason": "  ",
    })
    assert record.patient_name is None
    assert record.visit_type is None
    assert record.vitals.blood_pressure is None
    assert record.vitals.weight_kg is None
    assert record.vitals.temperature_celsius == 37.5
    assert record.symptoms == []
    assert record.symptom_severity is None
    assert record.services_provided == ["BP check"]
    assert record.follow_up_required is False
    assert record.referral_needed is True
    assert record.referral_reason is None


def test_coerce_vitals_not_a_dict():
    record = coerce_visit_record({"vitals": "normal"})
    assert record.vitals.blood_pressure is None
    assert record.vitals.weight_kg is None


def test_risk_fallback_shape():
    a = RiskAssessment.fallback()
    assert a.model_dump(by_alias=True) == {
        "isRedFlag": False,
        "riskScore": 0,
        "recommendation": "Unable to assess. Please consult your ASHA worker.",
        "reasons": [],
    }
    assert a.severity_level is None


def test_risk_coercion_clamps_and_filters():
    a = coerce_risk_assessment({
        "isRedFlag": "true",
        "riskScore": 250,
        "recommendation": "",
        "reasons": ["bleeding", None, 3],
    })
    assert a.is_red_flag is False
    assert a.risk_score == 100
    assert "ASHA worker" in a.recommendation
    assert a.reasons == ["bleeding"]
    # high score alone is not an alert
    assert a.severity_level is None


def test_risk_coercion_negative_and_bool_scores():
    assert coerce_risk_assessment({"riskScore": -5}).risk_score == 0
    assert coerce_risk_assessment({"riskScore": True}).risk_score == 0


def test_severity_levels():
    assert RiskAssessment(is_red_flag=True, risk_score=50).severity_level == "high"
    assert RiskAssessment(is_red_flag=True, risk_score=80).severity_level == "critical"
    assert RiskAssessment(is_red_flag=False, risk_score=10).severity_level is None


def test_no_red_flag_never_has_severity():
    assert RiskAssessment(is_red_flag=False, risk_score=85).severity_level is None
    assert coerce_risk_assessment({"isRedFlag": False, "riskScore": 95}).severity_level is None
