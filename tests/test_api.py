"""
API Client Tests
----------------
Status classification and the language model wrapper.
"""

import json

import httpx
import pytest

from api import (
    APIClient, APIConfig, APIStatus, LLMClient, LLMError,
    create_anthropic_client, create_memory_lol_client
)


class TestAPIClient:

    @pytest.mark.parametrize("status_code,expected", [
        (200, APIStatus.SUCCESS),
        (401, APIStatus.AUTH_ERROR),
        (403, APIStatus.AUTH_ERROR),
        (404, APIStatus.NOT_FOUND),
        (429, APIStatus.RATE_LIMITED),
        (500, APIStatus.SERVER_ERROR),
        (418, APIStatus.SERVER_ERROR),
    ])
    def test_status_classification(self, make_transport, status_code, expected):
        client = create_memory_lol_client(transport=make_transport(status_code, {"ok": True}))
        response = client.get("v1/tw/jack")

        assert response.status == expected
        assert response.status_code == status_code

    def test_invalid_json(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html>"))
        response = create_memory_lol_client(transport=transport).get("v1/tw/jack")

        assert response.status == APIStatus.SERVER_ERROR
        assert response.error == "Invalid JSON in response"

    def test_missing_key_short_circuits(self, make_transport):
        seen = []
        client = APIClient(
            APIConfig(name="keyed", base_url="https://example.test", api_key_env="MONAD_TEST_KEY"),
            transport=make_transport(200, {}, seen),
        )

        assert not client.is_configured
        response = client.get("anything")
        assert response.status == APIStatus.AUTH_ERROR
        assert seen == []

    def test_bearer_header(self, monkeypatch, make_transport):
        monkeypatch.setenv("MONAD_TEST_KEY", "secret")
        seen = []
        client = APIClient(
            APIConfig(name="keyed", base_url="https://example.test", api_key_env="MONAD_TEST_KEY"),
            transport=make_transport(200, {}, seen),
        )

        client.get("anything")
        assert seen[0].headers["Authorization"] == "Bearer secret"

    def test_anthropic_headers(self, monkeypatch, make_transport):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        seen = []
        client = create_anthropic_client(transport=make_transport(200, {}, seen))

        client.post("messages", data={"model": "m"})

        request = seen[0]
        assert str(request.url) == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "sk-test"
        assert request.headers["anthropic-version"] == "2023-06-01"
        assert "Authorization" not in request.headers


class TestLLMClient:

    def llm(self, monkeypatch, transport):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        return LLMClient(create_anthropic_client(transport=transport), model="test-model", max_tokens=50)

    def test_ask(self, monkeypatch, make_transport):
        seen = []
        payload = {"content": [{"type": "text", "text": "swap 2 MON to 0x..."}]}
        llm = self.llm(monkeypatch, make_transport(200, payload, seen))

        assert llm.ask("What should I do?") == "swap 2 MON to 0x..."

        body = json.loads(seen[0].content)
        assert body["model"] == "test-model"
        assert body["max_tokens"] == 50
        assert body["messages"] == [{"role": "user", "content": "What should I do?"}]
        assert "system" not in body

    def test_system_prompt(self, monkeypatch, make_transport):
        seen = []
        payload = {"content": [{"type": "text", "text": "ok"}]}
        self.llm(monkeypatch, make_transport(200, payload, seen)).ask("hi", system="Be brief")

        assert json.loads(seen[0].content)["system"] == "Be brief"

    def test_http_failure(self, monkeypatch, make_transport):
        llm = self.llm(monkeypatch, make_transport(500, {}))

        with pytest.raises(LLMError, match="Failed to get response"):
            llm.ask("hi")

    def test_no_text_block(self, monkeypatch, make_transport):
        llm = self.llm(monkeypatch, make_transport(200, {"content": [{"type": "tool_use"}]}))

        with pytest.raises(LLMError, match="no text"):
            llm.ask("hi")

    def test_unconfigured(self, make_transport):
        llm = LLMClient(create_anthropic_client(transport=make_transport(200, {})))

        assert not llm.is_configured
        with pytest.raises(LLMError, match="not configured"):
            llm.ask("hi")
