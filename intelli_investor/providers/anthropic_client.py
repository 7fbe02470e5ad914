"""Anthropic Messages API client used as the advisory oracle."""

from __future__ import annotations

import json
import re
from typing import Any

import requests

from intelli_investor.providers.http import ProviderError

JSON_INSTRUCTION = "Respond with a single JSON object only, without markdown fences or commentary."
_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$")


class AnthropicClient:
    def __init__(
        self,
        api_key: str,
        model: str,
        timeout_seconds: float = 30.0,
        max_tokens: int = 1200,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens
        self.base_url = "https://api.anthropic.com/v1/messages"

    def chat(self, system: str, messages: list[dict[str, str]], temperature: float = 0.3) -> str:
        payload: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": temperature,
            "system": system,
            "messages": messages,
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }
        try:
            response = requests.post(
                self.base_url,
                timeout=self.timeout_seconds,
                headers=headers,
                data=json.dumps(payload),
            )
        except requests.RequestException as error:
            raise ProviderError("anthropic", "NETWORK", f"Anthropic request failed: {error}") from error
        if response.status_code == 401:
            raise ProviderError("anthropic", "AUTH", "Anthropic authentication failed.", response.status_code)
        if response.status_code == 429:
            raise ProviderError("anthropic", "RATE_LIMIT", "Anthropic rate limit reached.", response.status_code)
        if not response.ok:
            raise ProviderError(
                "anthropic",
                "UPSTREAM",
                f"Anthropic request failed with status {response.status_code}.",
                response.status_code,
            )
        try:
            data = response.json()
        except ValueError:
            raise ProviderError("anthropic", "BAD_RESPONSE", "Anthropic returned non-JSON response.", response.status_code)
        content = data.get("content")
        if not isinstance(content, list):
            raise ProviderError("anthropic", "BAD_RESPONSE", "Anthropic response has no content.", response.status_code)
        texts = [item.get("text") for item in content if isinstance(item, dict) and isinstance(item.get("text"), str)]
        text = "\n".join(texts).strip()
        if not text:
            raise ProviderError("anthropic", "BAD_RESPONSE", "Anthropic returned empty content.", response.status_code)
        return text

    def complete(self, system: str, prompt: str) -> str:
        return self.chat(system, [{"role": "user", "content": prompt}])

    def complete_json(self, system: str, prompt: str) -> dict[str, Any]:
        text = self.chat(f"{system}\n\n{JSON_INSTRUCTION}", [{"role": "user", "content": prompt}], temperature=0.2)
        return parse_json_object(text)


def parse_json_object(text: str) -> dict[str, Any]:
    cleaned = _FENCE_PATTERN.sub("", text.strip())
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as error:
        raise ProviderError("anthropic", "BAD_RESPONSE", "Anthropic returned malformed JSON.") from error
    if not isinstance(parsed, dict):
        raise ProviderError("anthropic", "BAD_RESPONSE", "Anthropic JSON response was not an object.")
    return parsed
