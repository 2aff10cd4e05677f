# ashadidi/api/chat.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ashadidi.api.deps import get_llm_client
from ashadidi.runtime.companion import respond
from ashadidi.schemas.chat import ChatIn, ChatOut
from ashadidi.services.mistral_client import MistralClient

router = APIRouter(prefix="/api/chat", tags=["chat"])

HISTORY_TURNS = 5


@router.post("", response_model=ChatOut)
async def chat_endpoint(
    payload: ChatIn,
    client: MistralClient = Depends(get_llm_client),
):
    """
    Handle a chat message from frontend:
    1. Keep the last few turns of history
    2. Run flow (triage → emergency | intent → asha_didi)
    3. Return reply with emergency flag and tags
    """
    history = payload.messages[-HISTORY_TURNS:]
    result = await respond(payload.message, history, payload.language, client=client)
    return ChatOut(
        **result.model_dump(),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
