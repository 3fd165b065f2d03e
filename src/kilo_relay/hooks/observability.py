from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class HookEvent:
    at: datetime
    kind: str
    name: str
    payload: dict[str, Any] = field(default_factory=dict)


class EventLogger:
    def __init__(self) -> None:
        self._events: list[HookEvent] = []

    def record(self, kind: str, name: str, payload: dict[str, Any] | None = None) -> None:
        self._events.append(
            HookEvent(
                at=datetime.now(timezone.utc),
                kind=kind,
                name=name,
                payload=payload or {},
            )
        )

    def on_endpoint_selected(self, environment: str, base_url: str, decoded: bool) -> None:
        self.record("endpoint", environment, {"base_url": base_url, "decoded": decoded})

    def on_model_resolved(self, selector: str, model_id: str, phase: str) -> None:
        self.record("model_resolve", phase, {"selector": selector, "model_id": model_id})

    def on_catalog_refresh(self, provider: str, phase: str, model_count: int = 0) -> None:
        self.record("catalog_refresh", phase, {"provider": provider, "model_count": model_count})

    def list_events(self, kind: str | None = None) -> list[HookEvent]:
        if kind is None:
            return list(self._events)
        return [event for event in self._events if event.kind == kind]
