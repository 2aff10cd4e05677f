# ashadidi/runtime/flow.py
from __future__ import annotations

from pocketflow import AsyncFlow
from ashadidi.runtime.nodes.triage import EmergencyTriageNode
from ashadidi.runtime.nodes.emergency_reply import EmergencyReplyNode
from ashadidi.runtime.nodes.intent import IntentNode
from ashadidi.runtime.nodes.asha_didi import AshaDidiChatNode
from ashadidi.runtime.nodes.visit_extract import VisitExtractNode
from ashadidi.runtime.nodes.visit_completeness import VisitCompletenessNode
from ashadidi.runtime.nodes.symptom_risk import SymptomRiskNode


def make_chat_flow() -> AsyncFlow:
    """Asha Didi chat flow:
    triage → (emergency → emergency_reply)
           → (ok → intent → asha_didi)
    """

    triage = EmergencyTriageNode()
    emergency = EmergencyReplyNode()
    intent = IntentNode()
    chat = AshaDidiChatNode()

    # 1. triage routes; the emergency branch never reaches the model
    triage.successors = {
        "emergency": emergency,
        "ok": intent,
    }

    # 2. normal path
    intent.successors = {"ok": chat}

    return AsyncFlow(start=triage)


def make_visit_flow(*, score: bool = True) -> AsyncFlow:
    """Visit-note flow: visit_extract → (visit_completeness)"""

    extract = VisitExtractNode()
    if score:
        extract.successors = {"ok": VisitCompletenessNode()}
    return AsyncFlow(start=extract)


def make_risk_flow() -> AsyncFlow:
    """Symptom red-flag flow: symptom_risk"""

    return AsyncFlow(start=SymptomRiskNode())
