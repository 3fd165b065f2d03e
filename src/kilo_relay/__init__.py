"""Model resolution and endpoint selection for the Kilo Code OpenRouter relay."""

from .llm import (
    KilocodeRelayProvider,
    ModelInfo,
    ModelResolver,
    RelaySettings,
    ResolvedModel,
    UnsupportedModelError,
)

__all__ = [
    "KilocodeRelayProvider",
    "ModelInfo",
    "ModelResolver",
    "RelaySettings",
    "ResolvedModel",
    "UnsupportedModelError",
]
