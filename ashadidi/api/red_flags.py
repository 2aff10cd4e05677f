# ashadidi/api/red_flags.py
from fastapi import APIRouter, Depends

from ashadidi.api.deps import get_llm_client
from ashadidi.runtime.companion import analyze_symptoms
from ashadidi.schemas.risk import RedFlagIn, RedFlagOut
from ashadidi.services.mistral_client import MistralClient

router = APIRouter(prefix="/api/ai", tags=["red-flags"])


@router.post("/red-flag-detect", response_model=RedFlagOut)
async def red_flag_detect(
    payload: RedFlagIn,
    client: MistralClient = Depends(get_llm_client),
):
    assessment = await analyze_symptoms(
        payload.symptoms,
        payload.is_pregnant,
        payload.pregnancy_week,
        client=client,
    )
    return RedFlagOut.from_assessment(assessment)
