import pytest
from pocketflow import AsyncFlow
from pocketflow import AsyncNode

from ashadidi.runtime.nodes.triage import EmergencyTriageNode


@pytest.mark.asyncio
async def test_triage_routes_ok_logic():
    shared = {"user_text": "What should I eat during my period?"}
    triage = EmergencyTriageNode()
    flow = AsyncFlow(start=triage)
    triage.successors = {}  # end here for unit test
    action = await flow.run_async(shared)
    assert action == "ok"
    assert shared["is_emergency"] is False


@pytest.mark.asyncio
async def test_triage_routes_emergency_logic():
    shared = {"user_text": "मुझे बहुत दर्द हो रहा है"}
    triage = EmergencyTriageNode()
    flow = AsyncFlow(start=triage)
    triage.successors = {}
    action = await flow.run_async(shared)
    assert action == "emergency"
    assert shared["is_emergency"] is True


class DummyNext(AsyncNode):
    def __init__(self, label: str, **kwargs):
        super().__init__(**kwargs)
        self.label = label

    async def prep_async(self, shared): return shared
    async def exec_async(self, prep): return {"done": True}
    async def post_async(self, shared, prep, exec_res):
        shared["visited"] = self.label
        return "end"


@pytest.mark.asyncio
@pytest.mark.parametrize("text,branch", [
    ("hello didi", "normal"),
    ("water broke just now", "urgent"),
])
async def test_triage_routes_to_successor(text, branch):
    shared = {"user_text": text}
    triage = EmergencyTriageNode()
    triage.successors = {
        "ok": DummyNext("normal"),
        "emergency": DummyNext("urgent"),
    }
    flow = AsyncFlow(start=triage)

    action = await flow.run_async(shared)

    assert action == "end"
    assert shared["visited"] == branch


@pytest.mark.asyncio
async def test_triage_accepts_custom_detector():
    shared = {"user_text": "anything"}
    triage = EmergencyTriageNode(detector=lambda text: True)
    triage.successors = {}
    action = await AsyncFlow(start=triage).run_async(shared)
    assert action == "emergency"


@pytest.mark.asyncio
async def test_triage_missing_text_is_ok():
    shared = {}
    triage = EmergencyTriageNode()
    triage.successors = {}
    action = await AsyncFlow(start=triage).run_async(shared)
    assert action == "ok"
    assert shared["is_emergency"] is False
