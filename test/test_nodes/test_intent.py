import pytest
from pocketflow import AsyncFlow as Flow

from ashadidi.runtime.nodes.intent import IntentNode


@pytest.mark.asyncio
async def test_intent_node_tags_intent_and_category():
    shared = {"user_text": "How many IFA goli should I take?"}
    node = IntentNode()
    node.successors = {}

    action = await Flow(start=node).run_async(shared)

    assert action == "ok"
    assert shared["intent"] == "ifa_query"
    assert shared["category"] == "nutrition"


@pytest.mark.asyncio
async def test_intent_node_defaults_to_general():
    shared = {"user_text": "hello didi"}
    node = IntentNode()
    node.successors = {}

    await Flow(start=node).run_async(shared)

    assert shared["intent"] == "general_query"
    assert shared["category"] == "general"
