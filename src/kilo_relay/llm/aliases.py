from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# Unset selectors fall back to this legacy alias. Kept for previously persisted
# settings that never stored an explicit model.
DEFAULT_MODEL_SELECTOR = "gemini25"

# Published aliases are a compatibility contract for stored user selections:
# entries may be added, never changed or removed.
LEGACY_MODEL_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "gemini25": "google/gemini-2.5-pro-preview",
        "gpt41": "openai/gpt-4.1",
        "gemini25flashpreview": "google/gemini-2.5-flash-preview",
        "claude37": "anthropic/claude-3.7-sonnet",
    }
)


def resolve_model_alias(selector: str | None = None) -> str:
    """Map a legacy selector to its canonical model id; anything else passes through unchanged."""
    selected = DEFAULT_MODEL_SELECTOR if selector is None else selector
    return LEGACY_MODEL_ALIASES.get(selected, selected)
