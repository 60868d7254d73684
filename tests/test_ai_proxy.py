"""
Tests for the OpenAI-compatible completion proxy.
"""

import json

import httpx
import pytest

from core.exceptions import ProxyError, ProxyNotConfiguredError, ValidationError
from services.ai_proxy import CompletionProxy

COMPLETION = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "created": 1700000000,
    "model": "deepseek-chat",
    "choices": [{
        "index": 0,
        "message": {"role": "assistant", "content": "Hello!"},
        "finish_reason": "stop",
    }],
    "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5},
}


class UpstreamStub:
    def __init__(self, status=200, body=COMPLETION):
        self.status = status
        self.body = body
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return httpx.Response(self.status, json=self.body)


async def test_complete_swaps_model(settings):
    """Test the client model is replaced and extra options pass through."""
    upstream = UpstreamStub()
    proxy = CompletionProxy(settings, transport=httpx.MockTransport(upstream))

    result = await proxy.complete({
        "model": "gpt-4o",
        "messages": [{"role": "user", "content": "Hi"}],
        "temperature": 0.2,
    })

    assert result["choices"][0]["message"]["content"] == "Hello!"
    request = upstream.requests[0]
    assert str(request.url) == "https://ai.example.com/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer sk-test"
    sent = json.loads(request.content)
    assert sent["model"] == "deepseek-chat"
    assert sent["temperature"] == 0.2


async def test_missing_messages(settings):
    proxy = CompletionProxy(settings, transport=httpx.MockTransport(UpstreamStub()))

    with pytest.raises(ValidationError):
        await proxy.complete({"model": "x"})


async def test_streaming_refused(settings):
    proxy = CompletionProxy(settings, transport=httpx.MockTransport(UpstreamStub()))

    with pytest.raises(ValidationError, match="Streaming"):
        await proxy.complete({"messages": [{"role": "user", "content": "Hi"}], "stream": True})


async def test_not_configured(settings):
    unconfigured = settings.model_copy(update={"ai_proxy_api_key": ""})
    upstream = UpstreamStub()
    proxy = CompletionProxy(unconfigured, transport=httpx.MockTransport(upstream))

    with pytest.raises(ProxyNotConfiguredError):
        await proxy.complete({"messages": [{"role": "user", "content": "Hi"}]})
    assert upstream.requests == []


async def test_upstream_error(settings):
    upstream = UpstreamStub(status=401, body={"error": {"message": "bad key"}})
    proxy = CompletionProxy(settings, transport=httpx.MockTransport(upstream))

    with pytest.raises(ProxyError) as exc_info:
        await proxy.complete({"messages": [{"role": "user", "content": "Hi"}]})
    assert exc_info.value.http_status == 502
    assert exc_info.value.details == {"status_code": 401}
    assert len(upstream.requests) == 1


def test_endpoint_returns_completion(app, settings):
    from fastapi.testclient import TestClient

    app.state.completion_proxy = CompletionProxy(settings, transport=httpx.MockTransport(UpstreamStub()))
    response = TestClient(app).post(
        "/api/ai/chat/completions",
        json={"messages": [{"role": "user", "content": "Hi"}]}
    )

    assert response.status_code == 200
    assert response.json()["id"] == "chatcmpl-1"


def test_endpoint_not_configured_is_503(app, settings):
    from fastapi.testclient import TestClient

    app.state.completion_proxy = CompletionProxy(settings.model_copy(update={"ai_proxy_api_key": ""}))
    response = TestClient(app).post(
        "/api/ai/chat/completions",
        json={"messages": [{"role": "user", "content": "Hi"}]}
    )

    assert response.status_code == 503
    assert response.json() == {"success": False, "error": "AI proxy is not configured"}
