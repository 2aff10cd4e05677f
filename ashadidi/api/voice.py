# ashadidi/api/voice.py
from fastapi import APIRouter, Depends

from ashadidi.api.deps import get_llm_client
from ashadidi.runtime.companion import process_visit_note
from ashadidi.schemas.visit import VisitProcessIn, VisitProcessingResult
from ashadidi.services.mistral_client import MistralClient

router = APIRouter(prefix="/api/voice", tags=["voice"])


@router.post("/process", response_model=VisitProcessingResult)
async def process_voice_note(
    payload: VisitProcessIn,
    client: MistralClient = Depends(get_llm_client),
):
    """Extract a structured visit record from an already-transcribed ASHA visit note."""
    return await process_visit_note(payload.transcription, client=client)
