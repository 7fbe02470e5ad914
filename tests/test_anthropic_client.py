import pytest
import requests

from intelli_investor.providers.anthropic_client import AnthropicClient, parse_json_object
from intelli_investor.providers.http import ProviderError


class _Response:
    def __init__(self, status_code: int, payload: object) -> None:
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> object:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def test_parse_json_object_strips_fences() -> None:
    assert parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}


@pytest.mark.parametrize("text", ["not json", "[1, 2]"])
def test_parse_json_object_rejects_non_objects(text: str) -> None:
    with pytest.raises(ProviderError) as excinfo:
        parse_json_object(text)
    assert excinfo.value.code == "BAD_RESPONSE"


def test_complete_joins_text_blocks(monkeypatch) -> None:
    captured = {}

    def _post(url, timeout, headers, data):
        captured["headers"] = headers
        return _Response(200, {"content": [{"type": "text", "text": "Hold "}, {"type": "text", "text": "steady."}]})

    monkeypatch.setattr(requests, "post", _post)
    client = AnthropicClient("key", "model-x")
    assert client.complete("system", "prompt") == "Hold \nsteady."
    assert captured["headers"]["x-api-key"] == "key"


@pytest.mark.parametrize(
    ("status", "code"),
    [(401, "AUTH"), (429, "RATE_LIMIT"), (500, "UPSTREAM")],
)
def test_chat_maps_http_errors(monkeypatch, status: int, code: str) -> None:
    monkeypatch.setattr(requests, "post", lambda url, timeout, headers, data: _Response(status, {}))
    with pytest.raises(ProviderError) as excinfo:
        AnthropicClient("key", "model-x").complete("system", "prompt")
    assert excinfo.value.code == code


def test_chat_maps_network_errors(monkeypatch) -> None:
    def _post(url, timeout, headers, data):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(requests, "post", _post)
    with pytest.raises(ProviderError) as excinfo:
        AnthropicClient("key", "model-x").complete("system", "prompt")
    assert excinfo.value.code == "NETWORK"


def test_chat_rejects_empty_content(monkeypatch) -> None:
    monkeypatch.setattr(requests, "post", lambda url, timeout, headers, data: _Response(200, {"content": []}))
    with pytest.raises(ProviderError) as excinfo:
        AnthropicClient("key", "model-x").complete("system", "prompt")
    assert excinfo.value.code == "BAD_RESPONSE"
