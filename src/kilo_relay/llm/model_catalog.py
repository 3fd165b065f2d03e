from __future__ import annotations

import math
from typing import Any

import httpx

from .models import ModelInfo, ProviderId, RelayEnvironment
from .provider_auth import RELAY_BASE_URIS, RELAY_OPENROUTER_PATH, build_relay_auth_headers

DEFAULT_MODELS_BASE_URL = f"{RELAY_BASE_URIS[RelayEnvironment.PRODUCTION]}{RELAY_OPENROUTER_PATH}"

# Anthropic hybrid models that accept a thinking budget through the relay.
REASONING_BUDGET_MODELS = frozenset(
    {
        "anthropic/claude-3.7-sonnet:beta",
        "anthropic/claude-3.7-sonnet:thinking",
        "anthropic/claude-sonnet-4",
        "anthropic/claude-opus-4",
    }
)
REQUIRED_REASONING_BUDGET_MODELS = frozenset({"anthropic/claude-3.7-sonnet:thinking"})


async def get_models(
    provider: ProviderId | str = ProviderId.KILOCODE_OPENROUTER,
    *,
    base_url: str | None = None,
    api_key: str | None = None,
    request_timeout_seconds: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, ModelInfo]:
    try:
        provider = ProviderId(provider)
    except ValueError:
        raise RuntimeError(f"unsupported provider: {provider}") from None
    if provider != ProviderId.KILOCODE_OPENROUTER:
        raise RuntimeError(f"unsupported provider: {provider.value}")

    root = base_url or DEFAULT_MODELS_BASE_URL
    if not root.endswith("/"):
        root = f"{root}/"
    headers = {"Accept": "application/json"}
    if api_key and api_key.strip():
        headers = build_relay_auth_headers(api_key)

    timeout = httpx.Timeout(request_timeout_seconds)
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        response = await client.get(f"{root}models", headers=headers)
    if response.status_code in {401, 403}:
        raise RuntimeError(f"{provider.value} models request failed: token expired or forbidden")
    if response.status_code >= 400:
        raise RuntimeError(f"{provider.value} models request failed: HTTP {response.status_code}")
    return parse_openrouter_models(response.json())


def parse_openrouter_models(payload: Any) -> dict[str, ModelInfo]:
    rows = payload.get("data") if isinstance(payload, dict) else payload
    if not isinstance(rows, list):
        return {}

    result: dict[str, ModelInfo] = {}
    for raw in rows:
        if not isinstance(raw, dict):
            continue
        model_id = _to_clean_text(raw.get("id"))
        if not model_id:
            continue
        result[model_id] = _parse_model_info(model_id, raw)
    return result


def _parse_model_info(model_id: str, raw: dict[str, Any]) -> ModelInfo:
    pricing = raw.get("pricing") if isinstance(raw.get("pricing"), dict) else {}
    top_provider = raw.get("top_provider") if isinstance(raw.get("top_provider"), dict) else {}
    architecture = raw.get("architecture") if isinstance(raw.get("architecture"), dict) else {}
    supported_parameters = raw.get("supported_parameters")
    if not isinstance(supported_parameters, list):
        supported_parameters = []
    input_modalities = architecture.get("input_modalities")
    if not isinstance(input_modalities, list):
        input_modalities = []

    cache_writes_price = _per_million(pricing.get("input_cache_write"))
    cache_reads_price = _per_million(pricing.get("input_cache_read"))
    return ModelInfo(
        display_name=_to_clean_text(raw.get("name")),
        description=_to_clean_text(raw.get("description")),
        max_tokens=_to_int(top_provider.get("max_completion_tokens")),
        context_window=_to_int(raw.get("context_length")),
        supports_images="image" in input_modalities,
        supports_prompt_cache=cache_writes_price is not None or cache_reads_price is not None,
        supports_reasoning_effort="reasoning" in supported_parameters,
        supports_reasoning_budget=model_id in REASONING_BUDGET_MODELS,
        required_reasoning_budget=model_id in REQUIRED_REASONING_BUDGET_MODELS,
        input_price=_per_million(pricing.get("prompt")),
        output_price=_per_million(pricing.get("completion")),
        cache_writes_price=cache_writes_price,
        cache_reads_price=cache_reads_price,
    )


def _per_million(value: Any) -> float | None:
    parsed = _to_float(value)
    if parsed is None:
        return None
    return round(parsed * 1_000_000, 6)


def _to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        parsed = int(value)
        return parsed if parsed > 0 else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        parsed = int(number)
        return parsed if parsed > 0 else None
    return None


def _to_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        parsed = float(value)
        return parsed if math.isfinite(parsed) else None
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            parsed = float(raw)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def _to_clean_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None
