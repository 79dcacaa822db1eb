"""Gemini client status mapping, using httpx.MockTransport."""

import json

import httpx
import pytest

from chatsync.domain.exceptions import ExternalServiceFailure, RateLimitedError
from chatsync.domain.ports.generative_client import GenerationRequest
from chatsync.infrastructure.llm import GeminiClient

BASE_URL = "https://gemini.test/v1beta"
MODEL = "gemini-test"


def client_for(handler) -> GeminiClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiClient(api_key="k-123", model=MODEL, base_url=BASE_URL, http_client=http)


def reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


REQUEST = GenerationRequest(prompt="hi", system_instruction="be nice", web_grounding=True)


class TestGenerate:
    @pytest.mark.asyncio
    async def test_success_and_request_shape(self):
        seen = []

        def handler(request: httpx.Request):
            seen.append(request)
            return httpx.Response(200, json=reply("hello"))

        result = await client_for(handler).generate(REQUEST)

        request = seen[0]
        body = json.loads(request.content)
        assert result.text == "hello"
        assert request.url.path == f"/v1beta/models/{MODEL}:generateContent"
        assert request.url.params["key"] == "k-123"
        assert body["contents"] == [{"parts": [{"text": "hi"}]}]
        assert body["systemInstruction"] == {"parts": [{"text": "be nice"}]}
        assert body["tools"] == [{"google_search": {}}]

    @pytest.mark.asyncio
    async def test_no_tools_without_grounding(self):
        bodies = []

        def handler(request: httpx.Request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=reply("ok"))

        await client_for(handler).generate(GenerationRequest("hi", "sys"))

        assert "tools" not in bodies[0]

    @pytest.mark.asyncio
    async def test_missing_text_is_none(self):
        client = client_for(lambda request: httpx.Response(200, json={"candidates": []}))

        assert (await client.generate(REQUEST)).text is None

    @pytest.mark.asyncio
    async def test_429_is_rate_limited(self):
        client = client_for(lambda request: httpx.Response(429, json={}))

        with pytest.raises(RateLimitedError) as exc_info:
            await client.generate(REQUEST)

        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_server_error(self):
        client = client_for(lambda request: httpx.Response(503, text="unavailable"))

        with pytest.raises(ExternalServiceFailure) as exc_info:
            await client.generate(REQUEST)

        assert not isinstance(exc_info.value, RateLimitedError)
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ExternalServiceFailure) as exc_info:
            await client_for(handler).generate(REQUEST)

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_close_leaves_injected_client_open(self):
        http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        client = GeminiClient(api_key="k", model=MODEL, http_client=http)

        await client.close()

        assert http.is_closed is False
        await http.aclose()
