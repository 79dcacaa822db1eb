"""
Gemini generateContent client (async, httpx).

Request:
    POST {base_url}/models/{model}:generateContent?key={api_key}
    {
        "contents": [{"parts": [{"text": prompt}]}],
        "systemInstruction": {"parts": [{"text": system_instruction}]},
        "tools": [{"google_search": {}}]        # only when web grounding is on
    }

Response:
    {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}

Errors:
    429                 -> RateLimitedError
    other non-2xx       -> ExternalServiceFailure(status_code=...)
    transport / decode  -> ExternalServiceFailure(status_code=None)

No retries here; retry policy belongs to the caller.
"""

import logging
import time
from typing import Any, Optional

import httpx
from httpx import Timeout
from langsmith import traceable

from chatsync.domain.exceptions import ExternalServiceFailure, RateLimitedError
from chatsync.domain.ports.generative_client import (
    GenerationRequest,
    GenerationResult,
    GenerativeClient,
)
from chatsync.observability.metrics import observe_llm_latency

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = Timeout(40.0, connect=10.0)


def extract_text(payload: Any) -> Optional[str]:
    """candidates[0].content.parts[0].text, or None if any step is missing."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) and text else None


def build_payload(request: GenerationRequest) -> dict:
    payload = {
        "contents": [{"parts": [{"text": request.prompt}]}],
        "systemInstruction": {"parts": [{"text": request.system_instruction}]},
    }
    if request.web_grounding:
        payload["tools"] = [{"google_search": {}}]
    return payload


class GeminiClient(GenerativeClient):
    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: Optional[Timeout] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._api_key = api_key
        self._model = model
        self._endpoint = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout or DEFAULT_TIMEOUT)

    @traceable(run_type="llm", name="gemini_generate_content")
    async def generate(self, request: GenerationRequest) -> GenerationResult:
        started = time.perf_counter()
        outcome = "error"
        try:
            response = await self._http.post(
                self._endpoint,
                params={"key": self._api_key},
                json=build_payload(request),
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"[Gemini] Transport error calling {self._model}: {e}")
            raise ExternalServiceFailure(f"Transport error: {e}") from e
        else:
            if response.status_code == 429:
                outcome = "rate_limited"
                raise RateLimitedError()
            if not response.is_success:
                logger.warning(
                    f"[Gemini] {self._model} returned HTTP {response.status_code}"
                )
                raise ExternalServiceFailure(
                    f"API request failed with status: {response.status_code}",
                    status_code=response.status_code,
                )
            try:
                payload = response.json()
            except ValueError as e:
                raise ExternalServiceFailure("Response body is not JSON") from e
            outcome = "success"
            return GenerationResult(text=extract_text(payload))
        finally:
            observe_llm_latency(self._model, outcome, time.perf_counter() - started)

    async def close(self) -> None:
        if self._owns_client:
            await self._http.aclose()
