from __future__ import annotations

import base64
import json
import logging
from types import MappingProxyType
from typing import Any, Mapping

from kilo_relay.hooks.observability import EventLogger

from .models import RelayConnection, RelayEnvironment, RelaySettings

logger = logging.getLogger(__name__)

DEVELOPMENT_ENV_SENTINEL = "development"
RELAY_OPENROUTER_PATH = "/api/openrouter/"
RELAY_BASE_URIS: Mapping[RelayEnvironment, str] = MappingProxyType(
    {
        RelayEnvironment.PRODUCTION: "https://kilocode.ai",
        RelayEnvironment.DEVELOPMENT: "http://localhost:3000",
    }
)


def decode_token_payload(token: Any) -> dict[str, Any] | None:
    """
    Decode the claims segment of a header.payload.signature token.
    Returns None for anything that is not a base64 JSON object; never raises.
    The signature is not verified, so the result is untrusted.
    """
    if not isinstance(token, str):
        return None
    segments = token.split(".")
    if len(segments) < 2 or not segments[1]:
        return None

    segment = segments[1].strip().translate(str.maketrans("-_", "+/"))
    segment += "=" * (-len(segment) % 4)
    try:
        raw = base64.b64decode(segment)
        payload = json.loads(raw.decode("utf-8", errors="replace"))
    except (ValueError, RecursionError):
        return None
    if not isinstance(payload, dict):
        return None
    return payload


def select_relay_environment(token: Any, *, events: EventLogger | None = None) -> RelayEnvironment:
    payload = decode_token_payload(token)
    if payload is None:
        logger.warning("Failed to get base URL from Kilo Code token")
        environment = RelayEnvironment.PRODUCTION
    elif payload.get("env") == DEVELOPMENT_ENV_SENTINEL:
        environment = RelayEnvironment.DEVELOPMENT
    else:
        environment = RelayEnvironment.PRODUCTION

    if events is not None:
        events.on_endpoint_selected(
            environment=environment.value,
            base_url=RELAY_BASE_URIS[environment],
            decoded=payload is not None,
        )
    return environment


def get_relay_base_uri(token: Any, *, events: EventLogger | None = None) -> str:
    # Only the env flag is read; hosts never come from the token itself.
    return RELAY_BASE_URIS[select_relay_environment(token, events=events)]


def build_relay_connection(
    settings: RelaySettings,
    *,
    events: EventLogger | None = None,
) -> RelayConnection:
    environment = select_relay_environment(settings.kilocode_token, events=events)
    return RelayConnection(
        environment=environment,
        base_url=f"{RELAY_BASE_URIS[environment]}{RELAY_OPENROUTER_PATH}",
        api_key=settings.kilocode_token,
    )


def build_relay_auth_headers(api_key: str) -> dict[str, str]:
    key = api_key.strip()
    if not key:
        raise ValueError("kilocode token is empty")
    return {
        "Authorization": f"Bearer {key}",
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
