from __future__ import annotations

from typing import Any

import httpx

from .models import RelayConnection, ResolvedModel
from .provider_auth import build_relay_auth_headers


class RelayClient:
    """OpenRouter-compatible chat client bound to an already-resolved relay connection."""

    def __init__(
        self,
        connection: RelayConnection,
        *,
        request_timeout_seconds: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.connection = connection
        self.request_timeout_seconds = request_timeout_seconds
        self.transport = transport

    @property
    def base_url(self) -> str:
        return self.connection.base_url

    def build_request_body(self, model: ResolvedModel, messages: list[dict[str, Any]]) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": model.id,
            "messages": messages,
            "stream": False,
        }
        if model.temperature is not None:
            body["temperature"] = model.temperature
        if model.top_p is not None:
            body["top_p"] = model.top_p
        if model.max_tokens is not None:
            body["max_tokens"] = model.max_tokens
        if model.reasoning is not None:
            body["reasoning"] = model.reasoning
        return body

    def complete(self, model: ResolvedModel, messages: list[dict[str, Any]]) -> str:
        headers = build_relay_auth_headers(self.connection.api_key)
        timeout = httpx.Timeout(self.request_timeout_seconds)
        with httpx.Client(timeout=timeout, transport=self.transport) as client:
            response = client.post(
                f"{self.base_url}chat/completions",
                headers=headers,
                json=self.build_request_body(model, messages),
            )
        if response.status_code in {401, 403}:
            raise RuntimeError("relay chat request failed: token expired or forbidden")
        if response.status_code >= 400:
            detail = response.text[:300]
            raise RuntimeError(f"relay chat request failed: HTTP {response.status_code} ({detail})")
        text = _extract_text_from_payload(response.json())
        if text.strip():
            return text
        raise RuntimeError("relay chat request failed: empty response")


def _extract_text_from_payload(payload: Any) -> str:
    if not isinstance(payload, dict):
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list):
        return ""
    chunks: list[str] = []
    for choice in choices:
        if not isinstance(choice, dict):
            continue
        message = choice.get("message")
        if not isinstance(message, dict):
            continue
        content = message.get("content")
        if isinstance(content, str):
            chunks.append(content)
        elif isinstance(content, list):
            for part in content:
                if isinstance(part, dict) and isinstance(part.get("text"), str):
                    chunks.append(part["text"])
    return "".join(chunks)
