# ashadidi/services/mistral_client.py
import asyncio
import logging
import os
import httpx
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT = 30.0


class MistralError(RuntimeError):
    pass


def _env_timeout() -> float:
    raw = os.getenv("MISTRAL_TIMEOUT")
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        value = -1.0
    if not value > 0 or value == float("inf"):
        logger.warning("Invalid MISTRAL_TIMEOUT %r; using %.0fs", raw, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return value


class MistralClient:
    """Thin client for the Mistral Chat Completions API (OpenAI-compatible)."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: int = 0,
        backoff_factor: float = 0.6,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url or os.getenv("MISTRAL_BASE", "https://api.mistral.ai/v1")
        self.api_key = api_key if api_key is not None else os.getenv("MISTRAL_API_KEY", "")
        self.model = model or os.getenv("MISTRAL_MODEL", "mistral-large-latest")
        self.timeout = timeout if timeout is not None else _env_timeout()
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor

        if not self.api_key:
            # Not fatal: every call fails and callers take their fallback path.
            logger.warning("MISTRAL_API_KEY is not configured; AI features will degrade")

        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=transport
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def chat(
        self,
        messages: List[Dict[str, Any]],
        temperature: float = 0.2,
        max_tokens: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Perform a non-streaming chat completion and return assistant text.
        Raises MistralError on failure.
        """
        if not self.api_key:
            raise MistralError("MISTRAL_API_KEY is not configured")

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if extra:
            payload.update(extra)

        headers = {"Authorization": f"Bearer {self.api_key}"}

        last_exc: Optional[Exception] = None
        for attempt in range(self.max_retries + 1):
            try:
                res = await self._client.post("/chat/completions", headers=headers, json=payload)
                if res.status_code in (429, 500, 502, 503, 504):
                    raise MistralError(f"Transient HTTP {res.status_code}: {res.text[:200]}")
                res.raise_for_status()
                data = res.json()
                if not isinstance(data, dict):
                    raise MistralError(f"Unexpected payload: {data!r}")
                choices = data.get("choices") or []
                if not choices:
                    raise MistralError(f"Empty choices: {data!r}")
                message = choices[0].get("message") or {}
                content = message.get("content")
                if not isinstance(content, str):
                    raise MistralError(f"Invalid content: {message!r}")
                return content
            except (httpx.HTTPError, ValueError, MistralError) as e:
                last_exc = e
                logger.warning("Mistral call failed (attempt %d): %s", attempt + 1, e)
                if attempt >= self.max_retries:
                    break
                await asyncio.sleep(self.backoff_factor * (2 ** attempt))

        raise MistralError(f"Mistral chat failed: {last_exc}") from last_exc
