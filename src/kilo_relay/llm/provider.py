from __future__ import annotations

from functools import partial
from typing import Any

import httpx

from kilo_relay.hooks.observability import EventLogger

from .client import RelayClient
from .model_catalog import get_models
from .models import RelayConnection, RelaySettings, ResolvedModel
from .provider_auth import build_relay_connection
from .resolver import ModelFetcher, ModelResolver


class KilocodeRelayProvider:
    """
    Kilo Code OpenRouter relay: endpoint chosen once from the token, then a
    plain chat client plus a model resolver sharing that connection.
    """

    def __init__(
        self,
        settings: RelaySettings,
        *,
        events: EventLogger | None = None,
        fetch_models: ModelFetcher | None = None,
        transport: httpx.BaseTransport | None = None,
        catalog_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.events = events or EventLogger()
        self.connection: RelayConnection = build_relay_connection(settings, events=self.events)
        self.client = RelayClient(
            self.connection,
            request_timeout_seconds=settings.request_timeout_seconds,
            transport=transport,
        )
        self.resolver = ModelResolver(
            settings=settings,
            fetch_models=fetch_models
            or partial(
                get_models,
                base_url=self.connection.base_url,
                api_key=self.connection.api_key,
                request_timeout_seconds=settings.request_timeout_seconds,
                transport=catalog_transport,
            ),
            events=self.events,
        )

    def get_model(self, selector: str | None = None) -> ResolvedModel:
        return self.resolver.resolve(selector)

    async def fetch_model(self, selector: str | None = None) -> ResolvedModel:
        return await self.resolver.refresh_then_resolve(selector)

    def complete(self, messages: list[dict[str, Any]], selector: str | None = None) -> str:
        return self.client.complete(self.get_model(selector), messages)
