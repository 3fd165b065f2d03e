from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator

ReasoningEffort = Literal["low", "medium", "high"]


class ProviderId(str, Enum):
    KILOCODE_OPENROUTER = "kilocode-openrouter"


class RelayEnvironment(str, Enum):
    PRODUCTION = "production"
    DEVELOPMENT = "development"


class ModelParamsFormat(str, Enum):
    OPENROUTER = "openrouter"
    OPENAI = "openai"


class ModelInfo(BaseModel):
    """Catalog metadata for one canonical model id. Prices are USD per million tokens."""

    model_config = ConfigDict(frozen=True)

    display_name: str | None = None
    description: str | None = None
    max_tokens: int | None = None
    context_window: int | None = None
    supports_images: bool = False
    supports_prompt_cache: bool = False
    supports_reasoning_effort: bool = False
    supports_reasoning_budget: bool = False
    required_reasoning_budget: bool = False
    reasoning_effort: ReasoningEffort | None = None
    input_price: float | None = None
    output_price: float | None = None
    cache_writes_price: float | None = None
    cache_reads_price: float | None = None


class RelaySettings(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    kilocode_token: str = ""
    kilocode_model: str | None = None
    model_temperature: float | None = None
    model_max_tokens: int | None = None
    model_max_thinking_tokens: int | None = None
    reasoning_effort: ReasoningEffort | None = None
    enable_reasoning_effort: bool = False
    request_timeout_seconds: float = 60.0

    @model_validator(mode="after")
    def validate_ranges(self) -> "RelaySettings":
        if self.model_temperature is not None and not 0 <= self.model_temperature <= 2:
            raise ValueError("model_temperature must be between 0 and 2")
        if self.model_max_tokens is not None and self.model_max_tokens < 1:
            raise ValueError("model_max_tokens must be >= 1")
        if self.model_max_thinking_tokens is not None and self.model_max_thinking_tokens < 1:
            raise ValueError("model_max_thinking_tokens must be >= 1")
        if self.request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be positive")
        return self

    @classmethod
    def from_env(cls, **overrides: Any) -> "RelaySettings":
        values: dict[str, Any] = {
            "kilocode_token": _env_text("KILO_RELAY_TOKEN") or "",
            "kilocode_model": _env_text("KILO_RELAY_MODEL"),
            "model_temperature": _env_text("KILO_RELAY_MODEL_TEMPERATURE"),
            "model_max_tokens": _env_text("KILO_RELAY_MODEL_MAX_TOKENS"),
            "model_max_thinking_tokens": _env_text("KILO_RELAY_MODEL_MAX_THINKING_TOKENS"),
            "reasoning_effort": _env_text("KILO_RELAY_REASONING_EFFORT"),
            "enable_reasoning_effort": os.getenv("KILO_RELAY_ENABLE_REASONING_EFFORT", "0") == "1",
        }
        timeout = _env_text("KILO_RELAY_REQUEST_TIMEOUT_SECONDS")
        if timeout is not None:
            values["request_timeout_seconds"] = timeout
        values.update(overrides)
        return cls.model_validate(values)


class ResolvedModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    info: ModelInfo
    top_p: float | None = None
    format: ModelParamsFormat = ModelParamsFormat.OPENROUTER
    max_tokens: int | None = None
    temperature: float | None = None
    reasoning_effort: ReasoningEffort | None = None
    reasoning_budget: int | None = None
    reasoning: dict[str, Any] | None = None


@dataclass(frozen=True)
class RelayConnection:
    environment: RelayEnvironment
    base_url: str
    api_key: str


def _env_text(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
