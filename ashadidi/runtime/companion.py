"""
Public entry points for the Asha Didi core.

Each call runs one flow over a fresh ``shared`` dict and returns a fully
typed value object. Upstream model problems never escape as exceptions; the
nodes recover them into fallback values.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Iterable, List, Mapping, Optional, Union

from ashadidi.runtime.classify import normalize_language
from ashadidi.runtime.flow import make_chat_flow, make_risk_flow, make_visit_flow
from ashadidi.schemas.chat import ChatMessage, ChatResponse
from ashadidi.schemas.risk import RiskAssessment
from ashadidi.schemas.visit import ExtractedVisitRecord, VisitProcessingResult
from ashadidi.services.mistral_client import MistralClient

logger = logging.getLogger(__name__)

HistoryItem = Union[ChatMessage, Mapping[str, Any]]

_ROLES = ("user", "assistant", "system")


@asynccontextmanager
async def _client_scope(client: Optional[MistralClient]) -> AsyncIterator[MistralClient]:
    """Use the caller's client, or a short-lived one closed on exit."""
    if client is not None:
        yield client
        return
    owned = MistralClient()
    try:
        yield owned
    finally:
        await owned.aclose()


def normalize_history(history: Optional[Iterable[HistoryItem]]) -> List[Dict[str, str]]:
    out: List[Dict[str, str]] = []
    for item in history or []:
        if isinstance(item, ChatMessage):
            role, content = item.role, item.content
        elif isinstance(item, Mapping):
            role, content = item.get("role"), item.get("content")
        else:
            continue
        if role not in _ROLES or not isinstance(content, str) or not content.strip():
            continue
        out.append({"role": role, "content": content})
    return out


async def respond(
    user_message: str,
    history: Optional[Iterable[HistoryItem]] = None,
    language: str = "hi",
    *,
    client: Optional[MistralClient] = None,
) -> ChatResponse:
    """Answer one chat turn as Asha Didi.

    Emergencies get the canned message without any model call. Otherwise
    the turn is classified and sent to the model; failures come back as a
    localized apology with ``is_emergency=False``.
    """
    shared: Dict[str, Any] = {
        "user_text": user_message or "",
        "history": normalize_history(history),
        "language": normalize_language(language),
    }
    flow = make_chat_flow()
    async with _client_scope(client) as llm:
        shared["llm_client"] = llm
        await flow.run_async(shared)

    return ChatResponse(
        message=shared["assistant_reply"],
        is_emergency=bool(shared.get("is_emergency")),
        intent=shared.get("intent"),
        category=shared.get("category"),
    )


async def extract_visit_data(
    transcription: str,
    *,
    client: Optional[MistralClient] = None,
) -> ExtractedVisitRecord:
    shared: Dict[str, Any] = {"transcription": transcription or ""}
    flow = make_visit_flow(score=False)
    async with _client_scope(client) as llm:
        shared["llm_client"] = llm
        await flow.run_async(shared)
    return shared["visit_record"]


async def process_visit_note(
    transcription: str,
    *,
    client: Optional[MistralClient] = None,
) -> VisitProcessingResult:
    """Extract a visit record and report what is still missing.

    Raises ValueError for a blank transcription.
    """
    if not (transcription or "").strip():
        raise ValueError("No speech detected or transcription is empty")

    shared: Dict[str, Any] = {"transcription": transcription}
    flow = make_visit_flow()
    async with _client_scope(client) as llm:
        shared["llm_client"] = llm
        await flow.run_async(shared)

    return VisitProcessingResult(
        transcription=transcription,
        extracted_data=shared["visit_record"],
        confidence_score=shared["confidence_score"],
        missing_fields=shared["missing_fields"],
        follow_up_question=shared["follow_up_question"],
        is_complete=shared["is_complete"],
    )


async def analyze_symptoms(
    symptoms: Iterable[str],
    is_pregnant: bool,
    pregnancy_week: Optional[int] = None,
    *,
    client: Optional[MistralClient] = None,
) -> RiskAssessment:
    shared: Dict[str, Any] = {
        "symptoms": [s for s in symptoms or [] if isinstance(s, str) and s.strip()],
        "is_pregnant": bool(is_pregnant),
        "pregnancy_week": pregnancy_week,
    }
    flow = make_risk_flow()
    async with _client_scope(client) as llm:
        shared["llm_client"] = llm
        await flow.run_async(shared)

    assessment: RiskAssessment = shared["risk_assessment"]
    if assessment.is_red_flag:
        logger.info("Red flag assessment: score=%s", assessment.risk_score)
    return assessment
