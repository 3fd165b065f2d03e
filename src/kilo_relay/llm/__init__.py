"""Kilo Code relay: legacy model aliases, parameter derivation, and endpoint selection."""

from .aliases import DEFAULT_MODEL_SELECTOR, LEGACY_MODEL_ALIASES, resolve_model_alias
from .client import RelayClient
from .model_catalog import get_models, parse_openrouter_models
from .model_params import derive_model_params
from .models import (
    ModelInfo,
    ModelParamsFormat,
    ProviderId,
    RelayConnection,
    RelayEnvironment,
    RelaySettings,
    ResolvedModel,
)
from .provider import KilocodeRelayProvider
from .provider_auth import (
    build_relay_auth_headers,
    build_relay_connection,
    decode_token_payload,
    get_relay_base_uri,
    select_relay_environment,
)
from .resolver import ModelResolver, UnsupportedModelError, is_reasoning_model

__all__ = [
    "build_relay_auth_headers",
    "build_relay_connection",
    "decode_token_payload",
    "DEFAULT_MODEL_SELECTOR",
    "derive_model_params",
    "get_models",
    "get_relay_base_uri",
    "is_reasoning_model",
    "KilocodeRelayProvider",
    "LEGACY_MODEL_ALIASES",
    "ModelInfo",
    "ModelParamsFormat",
    "ModelResolver",
    "parse_openrouter_models",
    "ProviderId",
    "RelayClient",
    "RelayConnection",
    "RelayEnvironment",
    "RelaySettings",
    "ResolvedModel",
    "resolve_model_alias",
    "select_relay_environment",
    "UnsupportedModelError",
]
