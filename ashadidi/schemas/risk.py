from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ashadidi.runtime.lexicon import RISK_FALLBACK_RECOMMENDATION

CRITICAL_SCORE = 80


class RiskAssessment(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_red_flag: bool = Field(False, alias="isRedFlag")
    risk_score: float = Field(0, ge=0, le=100, alias="riskScore")
    recommendation: str = Field(RISK_FALLBACK_RECOMMENDATION, min_length=1)
    reasons: List[str] = Field(default_factory=list)

    @classmethod
    def fallback(cls) -> "RiskAssessment":
        """Conservative answer used whenever no assessment could be obtained."""
        return cls()

    @property
    def severity_level(self) -> Optional[str]:
        # alert severity for escalation; only red flags escalate
        if not self.is_red_flag:
            return None
        return "critical" if self.risk_score >= CRITICAL_SCORE else "high"


class RedFlagIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symptoms: List[str]
    is_pregnant: bool = Field(False, alias="isPregnant")
    pregnancy_week: Optional[int] = Field(None, ge=0, le=45, alias="pregnancyWeek")

    @field_validator("symptoms")
    @classmethod
    def _non_empty(cls, v: List[str]) -> List[str]:
        cleaned = [s.strip() for s in v if s and s.strip()]
        if not cleaned:
            raise ValueError("Symptoms array is required")
        return cleaned


class RedFlagOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_red_flag: bool = Field(alias="isRedFlag")
    risk_score: float = Field(alias="riskScore")
    recommendation: str
    reasons: List[str] = Field(default_factory=list)
    severity_level: Optional[str] = Field(None, alias="severityLevel")

    @classmethod
    def from_assessment(cls, a: RiskAssessment) -> "RedFlagOut":
        return cls(
            is_red_flag=a.is_red_flag,
            risk_score=a.risk_score,
            recommendation=a.recommendation,
            reasons=list(a.reasons),
            severity_level=a.severity_level,
        )


def _score(v: Any) -> float:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return 0.0
    if math.isnan(v):
        return 0.0
    return float(min(100, max(0, v)))


def coerce_risk_assessment(raw: Optional[Dict[str, Any]]) -> RiskAssessment:
    """Typed assessment from parsed model JSON; fallback when there is none."""
    if not isinstance(raw, dict):
        return RiskAssessment.fallback()
    recommendation = raw.get("recommendation")
    if not isinstance(recommendation, str) or not recommendation.strip():
        recommendation = RISK_FALLBACK_RECOMMENDATION
    reasons = raw.get("reasons")
    return RiskAssessment(
        is_red_flag=raw.get("isRedFlag") is True,
        risk_score=_score(raw.get("riskScore")),
        recommendation=recommendation.strip(),
        reasons=[r for r in reasons if isinstance(r, str) and r.strip()] if isinstance(reasons, list) else [],
    )
