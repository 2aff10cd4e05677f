# ashadidi/api/deps.py
from __future__ import annotations

from fastapi import Request

from ashadidi.services.mistral_client import MistralClient


# -------------------------
# FastAPI dependency
# -------------------------

async def get_llm_client(request: Request) -> MistralClient:
    """
    FastAPI dependency to inject the app-wide model client:

        @router.post("/...")
        async def handler(client: MistralClient = Depends(get_llm_client)):
            ...

    The lifespan creates the client at startup. An app served without its
    lifespan gets one on first use; this runs on the event loop, so the
    check and the assignment cannot interleave with another request.
    """
    client = getattr(request.app.state, "llm_client", None)
    if client is None:
        client = MistralClient()
        request.app.state.llm_client = client
    return client
