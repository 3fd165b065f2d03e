"""Observability hooks for endpoint selection, model resolution, and catalog refresh."""

from .observability import EventLogger, HookEvent

__all__ = [
    "EventLogger",
    "HookEvent",
]
