import asyncio
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from ashadidi.api.deps import get_llm_client
from ashadidi.main import app
from ashadidi.runtime.lexicon import EMERGENCY_MESSAGES
from ashadidi.services.mistral_client import MistralClient


class FakeLLMClient:
    def __init__(self, reply: str = "MOCK_REPLY") -> None:
        self.reply = reply
        self.calls = []

    async def chat(self, *, messages, temperature, max_tokens=None) -> str:
        self.calls.append(messages)
        return self.reply


@pytest.fixture()
def fake_llm():
    return FakeLLMClient()


@pytest.fixture()
def client(fake_llm):
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_chat_normal_turn(client, fake_llm):
    fake_llm.reply = "Iron wali cheezein khaiye."
    res = client.post("/api/chat", json={"message": "What should I eat during my period?", "language": "en"})

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Iron wali cheezein khaiye."
    assert body["isEmergency"] is False
    assert body["intent"] == "menstrual_query"
    assert body["category"] == "menstrual_health"
    assert body["timestamp"]


def test_chat_emergency_turn(client, fake_llm):
    res = client.post("/api/chat", json={"message": "बचाओ, बहुत खून"})

    assert res.status_code == 200
    body = res.json()
    assert body["isEmergency"] is True
    assert body["message"] == EMERGENCY_MESSAGES["hi"]
    assert fake_llm.calls == []


def test_chat_truncates_history(client, fake_llm):
    history = [
        {"role": "user" if i % 2 == 0 else "assistant", "content": f"turn {i}"}
        for i in range(8)
    ]
    res = client.post("/api/chat", json={"message": "hello didi", "messages": history})

    assert res.status_code == 200
    sent = fake_llm.calls[0]
    # system + last 5 turns + current message
    assert len(sent) == 7
    assert sent[1]["content"] == "turn 3"


def test_chat_blank_message_is_400(client):
    res = client.post("/api/chat", json={"message": "   "})
    assert res.status_code == 400
    assert "error" in res.json()


def test_voice_process(client, fake_llm):
    fake_llm.reply = (
        '{"patient_name": "Sunita", "visit_type": "routine_checkup", '
        '"vitals": {"weight_kg": 55}, "symptoms": ["headache"]}'
    )
    res = client.post("/api/voice/process", json={"transcription": "Sunita ji, vazan 55 kilo, sir dard"})

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["extracted_data"]["patient_name"] == "Sunita"
    assert body["extracted_data"]["referral_needed"] is False
    assert body["missing_fields"] == []
    assert body["is_complete"] is True
    assert body["follow_up_question"] is None
    assert body["confidence_score"] == 0.6


def test_voice_process_blank_is_400(client):
    res = client.post("/api/voice/process", json={"transcription": ""})
    assert res.status_code == 400


def test_red_flag_detect(client, fake_llm):
    fake_llm.reply = (
        '{"isRedFlag": true, "riskScore": 85, "recommendation": "Go to hospital now", '
        '"reasons": ["Heavy bleeding"]}'
    )
    res = client.post(
        "/api/ai/red-flag-detect",
        json={"symptoms": ["heavy bleeding"], "isPregnant": True, "pregnancyWeek": 30},
    )

    assert res.status_code == 200
    body = res.json()
    assert body["isRedFlag"] is True
    assert body["riskScore"] == 85
    assert body["severityLevel"] == "critical"
    assert body["reasons"] == ["Heavy bleeding"]


def test_red_flag_detect_requires_symptoms(client):
    res = client.post("/api/ai/red-flag-detect", json={"symptoms": []})
    assert res.status_code == 400


def test_lifespan_creates_one_shared_client(monkeypatch):
    monkeypatch.delenv("MISTRAL_API_KEY", raising=False)

    with TestClient(app):
        created = app.state.llm_client
        assert isinstance(created, MistralClient)


@pytest.mark.asyncio
async def test_concurrent_requests_share_lazily_created_client(monkeypatch):
    monkeypatch.delenv("MISTRAL_API_KEY", raising=False)
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))

    first, second = await asyncio.gather(get_llm_client(request), get_llm_client(request))
    try:
        assert first is second
        assert request.app.state.llm_client is first
    finally:
        await first.aclose()
