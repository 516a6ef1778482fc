import asyncio

import httpx
import pytest
import requests

import gemini_client

REPLY = {"candidates": [{"content": {"parts": [{"text": '  {"ok": true}  '}]}}]}


class FakeResponse:
    def __init__(self, status_code=200, body=REPLY):
        self.status_code = status_code
        self.ok = status_code < 400
        self._body = body

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.delenv("GEMINI_MODEL", raising=False)


def test_missing_api_key_raises(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "")
    with pytest.raises(gemini_client.GeminiClientError):
        gemini_client.generate_text("oi")


def test_generate_text_posts_prompt_and_returns_text(api_key, monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json, timeout))
        return FakeResponse()

    monkeypatch.setattr(gemini_client.requests, "post", fake_post)

    assert gemini_client.generate_text("Crie um quiz", temperature=0.2) == '{"ok": true}'
    url, payload, timeout = calls[0]
    assert url.endswith(f"models/{gemini_client.DEFAULT_MODEL}:generateContent?key=test-key")
    assert payload["contents"][0]["parts"][0]["text"] == "Crie um quiz"
    assert payload["generationConfig"]["temperature"] == 0.2
    assert timeout == 30


def test_generate_text_uses_configured_model(api_key, monkeypatch):
    monkeypatch.setenv("GEMINI_MODEL", "gemini-pro")
    urls = []
    monkeypatch.setattr(gemini_client.requests, "post", lambda url, **kw: urls.append(url) or FakeResponse())
    gemini_client.generate_text("oi")
    assert "/models/gemini-pro:" in urls[0]


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(status_code=500),
        FakeResponse(body=ValueError("not json")),
        FakeResponse(body={"candidates": []}),
        FakeResponse(body={"candidates": [{"content": {"parts": []}}]}),
        FakeResponse(body={"candidates": [{"content": {"parts": [{"text": ""}]}}]}),
    ],
)
def test_generate_text_rejects_bad_responses(api_key, monkeypatch, response):
    monkeypatch.setattr(gemini_client.requests, "post", lambda url, **kw: response)
    with pytest.raises(gemini_client.GeminiClientError):
        gemini_client.generate_text("oi")


def test_generate_text_wraps_network_errors(api_key, monkeypatch):
    def fake_post(url, **kwargs):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(gemini_client.requests, "post", fake_post)
    with pytest.raises(gemini_client.GeminiClientError):
        gemini_client.generate_text("oi")


def mock_async_client(monkeypatch, handler):
    real_client = httpx.AsyncClient

    def factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(gemini_client.httpx, "AsyncClient", factory)


def test_generate_text_async(api_key, monkeypatch):
    mock_async_client(monkeypatch, lambda request: httpx.Response(200, json=REPLY))
    assert asyncio.run(gemini_client.generate_text_async("oi")) == '{"ok": true}'


def test_generate_text_async_rejects_error_status(api_key, monkeypatch):
    mock_async_client(monkeypatch, lambda request: httpx.Response(429, json={"error": "quota"}))
    with pytest.raises(gemini_client.GeminiClientError):
        asyncio.run(gemini_client.generate_text_async("oi"))


def test_generate_text_async_wraps_transport_errors(api_key, monkeypatch):
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    mock_async_client(monkeypatch, handler)
    with pytest.raises(gemini_client.GeminiClientError):
        asyncio.run(gemini_client.generate_text_async("oi"))
