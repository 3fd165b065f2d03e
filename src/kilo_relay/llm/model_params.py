from __future__ import annotations

from typing import Any

from .models import ModelInfo, ModelParamsFormat, ReasoningEffort, RelaySettings

DEFAULT_HYBRID_REASONING_MODEL_MAX_TOKENS = 16_384
DEFAULT_HYBRID_REASONING_MODEL_THINKING_TOKENS = 8_192
MIN_REASONING_BUDGET_TOKENS = 1_024
REASONING_BUDGET_MAX_TOKENS_RATIO = 0.8
REASONING_BUDGET_TEMPERATURE = 1.0


def should_use_reasoning_budget(*, model: ModelInfo, settings: RelaySettings) -> bool:
    if model.required_reasoning_budget:
        return True
    return model.supports_reasoning_budget and settings.enable_reasoning_effort


def should_use_reasoning_effort(*, model: ModelInfo, settings: RelaySettings) -> bool:
    if model.supports_reasoning_effort and settings.reasoning_effort:
        return True
    return model.reasoning_effort is not None


def derive_model_params(
    *,
    format: ModelParamsFormat,
    model_id: str,
    model: ModelInfo,
    settings: RelaySettings,
    default_temperature: float = 0,
) -> dict[str, Any]:
    """
    Shared max-tokens / temperature / reasoning policy for OpenAI-compatible formats.

    A reasoning budget (thinking tokens) wins over reasoning effort and pins the
    temperature to 1.0.
    Otherwise the caller's temperature setting wins over ``default_temperature``.
    """
    temperature = (
        settings.model_temperature if settings.model_temperature is not None else default_temperature
    )
    max_tokens = settings.model_max_tokens or model.max_tokens
    reasoning_budget: int | None = None
    reasoning_effort: ReasoningEffort | None = None

    if should_use_reasoning_budget(model=model, settings=settings):
        max_tokens = settings.model_max_tokens or DEFAULT_HYBRID_REASONING_MODEL_MAX_TOKENS
        reasoning_budget = (
            settings.model_max_thinking_tokens or DEFAULT_HYBRID_REASONING_MODEL_THINKING_TOKENS
        )
        reasoning_budget = min(reasoning_budget, int(max_tokens * REASONING_BUDGET_MAX_TOKENS_RATIO))
        reasoning_budget = max(reasoning_budget, MIN_REASONING_BUDGET_TOKENS)
        temperature = REASONING_BUDGET_TEMPERATURE
    elif should_use_reasoning_effort(model=model, settings=settings):
        reasoning_effort = settings.reasoning_effort or model.reasoning_effort

    params: dict[str, Any] = {
        "format": format,
        "max_tokens": max_tokens,
        "temperature": temperature,
        "reasoning_effort": reasoning_effort,
        "reasoning_budget": reasoning_budget,
    }
    if format == ModelParamsFormat.OPENROUTER:
        params["reasoning"] = _openrouter_reasoning(
            reasoning_budget=reasoning_budget,
            reasoning_effort=reasoning_effort,
        )
    elif format == ModelParamsFormat.OPENAI:
        params["reasoning"] = None
    else:
        raise ValueError(f"unsupported params format for {model_id}: {format}")
    return params


def _openrouter_reasoning(
    *,
    reasoning_budget: int | None,
    reasoning_effort: ReasoningEffort | None,
) -> dict[str, Any] | None:
    if reasoning_budget is not None:
        return {"max_tokens": reasoning_budget}
    if reasoning_effort is not None:
        return {"effort": reasoning_effort}
    return None
