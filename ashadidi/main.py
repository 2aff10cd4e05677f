import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ashadidi.api import chat, red_flags, voice
from ashadidi.services.mistral_client import MistralClient

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # one shared client; construction never fails, missing credentials only degrade calls
    app.state.llm_client = MistralClient()
    yield
    client = getattr(app.state, "llm_client", None)
    if client is not None:
        await client.aclose()


app = FastAPI(title="Asha Didi API", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # bad input is a 400 for the frontend, not 422
    first = exc.errors()[0] if exc.errors() else {}
    return JSONResponse(status_code=400, content={"error": first.get("msg", "Invalid request")})


app.include_router(chat.router)
app.include_router(voice.router)
app.include_router(red_flags.router)
