from __future__ import annotations

from types import MappingProxyType
from typing import Awaitable, Callable, Mapping

from kilo_relay.hooks.observability import EventLogger

from .aliases import DEFAULT_MODEL_SELECTOR, resolve_model_alias
from .model_params import derive_model_params
from .models import ModelInfo, ModelParamsFormat, ProviderId, RelaySettings, ResolvedModel

DEEP_SEEK_DEFAULT_TEMPERATURE = 0.6
REASONING_MODEL_TOP_P = 0.95
REASONING_MODEL_PREFIX = "deepseek/deepseek-r1"
REASONING_MODEL_IDS = frozenset({"perplexity/sonar-reasoning"})

ModelFetcher = Callable[[ProviderId], Awaitable[Mapping[str, ModelInfo]]]


class UnsupportedModelError(RuntimeError):
    def __init__(self, selector: str, model_id: str) -> None:
        super().__init__(f"Unsupported model: {selector}")
        self.selector = selector
        self.model_id = model_id


def is_reasoning_model(model_id: str) -> bool:
    return model_id.startswith(REASONING_MODEL_PREFIX) or model_id in REASONING_MODEL_IDS


class ModelResolver:
    """
    Resolves a model selector against the relay's model catalog.

    The catalog starts empty and is swapped wholesale by ``refresh``; resolving
    before the first successful refresh raises ``UnsupportedModelError``.
    """

    def __init__(
        self,
        *,
        settings: RelaySettings,
        fetch_models: ModelFetcher,
        provider: ProviderId = ProviderId.KILOCODE_OPENROUTER,
        events: EventLogger | None = None,
    ) -> None:
        self.settings = settings
        self.fetch_models = fetch_models
        self.provider = provider
        self.events = events or EventLogger()
        self._models: Mapping[str, ModelInfo] = MappingProxyType({})

    @property
    def models(self) -> Mapping[str, ModelInfo]:
        return self._models

    async def refresh(self) -> Mapping[str, ModelInfo]:
        self.events.on_catalog_refresh(provider=self.provider.value, phase="start")
        try:
            fetched = await self.fetch_models(self.provider)
        except Exception:
            self.events.on_catalog_refresh(provider=self.provider.value, phase="error")
            raise
        # Last completed refresh wins.
        self._models = MappingProxyType(dict(fetched))
        self.events.on_catalog_refresh(
            provider=self.provider.value,
            phase="success",
            model_count=len(self._models),
        )
        return self._models

    def resolve(self, selector: str | None = None) -> ResolvedModel:
        selected = selector if selector is not None else self.settings.kilocode_model
        if selected is None:
            selected = DEFAULT_MODEL_SELECTOR
        model_id = resolve_model_alias(selected)

        info = self._models.get(model_id)
        if info is None:
            self.events.on_model_resolved(selector=selected, model_id=model_id, phase="unsupported")
            raise UnsupportedModelError(selected, model_id)

        reasoning = is_reasoning_model(model_id)
        params = derive_model_params(
            format=ModelParamsFormat.OPENROUTER,
            model_id=model_id,
            model=info,
            settings=self.settings,
            default_temperature=DEEP_SEEK_DEFAULT_TEMPERATURE if reasoning else 0,
        )
        self.events.on_model_resolved(selector=selected, model_id=model_id, phase="resolved")
        return ResolvedModel(
            id=model_id,
            info=info,
            top_p=REASONING_MODEL_TOP_P if reasoning else None,
            **params,
        )

    async def refresh_then_resolve(self, selector: str | None = None) -> ResolvedModel:
        await self.refresh()
        return self.resolve(selector)
