import json

import httpx
import pytest

from integrations.gemini_client import GeminiClient


def _client(handler):
    return GeminiClient(api_key="test-key", model="test-model", transport=httpx.MockTransport(handler))


def test_generate_posts_prompt_and_joins_text_parts():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "candidates": [{"content": {"parts": [{"text": "  SELECT "}, {"text": "1;  "}]}}],
        })

    with _client(handler) as gemini:
        assert gemini.generate("How many orders?") == "SELECT 1;"

    assert seen["path"] == "/v1beta/models/test-model:generateContent"
    assert seen["key"] == "test-key"
    assert seen["body"]["contents"][0]["parts"][0]["text"] == "How many orders?"


def test_http_error_raises_runtime_error():
    gemini = _client(lambda request: httpx.Response(503, json={"error": {"message": "overloaded"}}))
    with pytest.raises(RuntimeError, match="Gemini request failed"):
        gemini.generate("hello")


def test_missing_candidates_raise_runtime_error():
    gemini = _client(lambda request: httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}}))
    with pytest.raises(RuntimeError, match="no text candidates"):
        gemini.generate("hello")

