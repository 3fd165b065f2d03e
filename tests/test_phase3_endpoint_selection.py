import base64
import json
import logging

import pytest

from conftest import make_token
from kilo_relay.hooks.observability import EventLogger
from kilo_relay.llm.models import RelayEnvironment, RelaySettings
from kilo_relay.llm.provider_auth import (
    build_relay_auth_headers,
    build_relay_connection,
    decode_token_payload,
    get_relay_base_uri,
    select_relay_environment,
)


def test_development_env_selects_localhost() -> None:
    token = make_token({"env": "development"})
    assert select_relay_environment(token) == RelayEnvironment.DEVELOPMENT
    assert get_relay_base_uri(token) == "http://localhost:3000"


@pytest.mark.parametrize(
    "payload",
    [
        {"env": "production"},
        {"env": "Development"},
        {"env": ["development"]},
        {},
        {"environment": "development"},
        {"env": "development-evil", "base_url": "https://attacker.example"},
    ],
)
def test_other_payloads_select_production(payload: dict) -> None:
    assert get_relay_base_uri(make_token(payload)) == "https://kilocode.ai"


def test_token_cannot_choose_host() -> None:
    token = make_token({"env": "development", "url": "https://attacker.example", "host": "evil"})
    assert get_relay_base_uri(token) == "http://localhost:3000"


def test_invalid_token_falls_back_to_production_with_one_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="kilo_relay.llm.provider_auth"):
        base_uri = get_relay_base_uri("not-a-valid-jwt")
    assert base_uri == "https://kilocode.ai"
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1


def test_valid_production_token_emits_no_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="kilo_relay.llm.provider_auth"):
        get_relay_base_uri(make_token({"env": "production"}))
    assert not caplog.records


@pytest.mark.parametrize(
    "token",
    [
        "",
        "a.",
        "a..b",
        "a.!!!.b",
        "a.bm90LWpzb24.b",
        f"a.{base64.b64encode(b'[1, 2]').decode()}.b",
        f"a.{base64.b64encode(bytes([0xff, 0xfe])).decode()}.b",
        "a." + base64.b64encode(b"[" * 100000).decode() + ".b",
        "a." + base64.b64encode(b'{"env": ' * 50000).decode() + ".b",
        None,
        12345,
    ],
)
def test_decode_token_payload_is_total(token) -> None:
    assert decode_token_payload(token) is None
    assert select_relay_environment(token) == RelayEnvironment.PRODUCTION


def test_decode_accepts_unpadded_urlsafe_segment() -> None:
    raw = json.dumps({"env": "development", "note": "??>>"}).encode("utf-8")
    segment = base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
    assert decode_token_payload(f"h.{segment}.s") == {"env": "development", "note": "??>>"}


def test_build_relay_connection_uses_openrouter_path() -> None:
    events = EventLogger()
    token = make_token({"env": "development"})
    connection = build_relay_connection(RelaySettings(kilocode_token=token), events=events)
    assert connection.environment == RelayEnvironment.DEVELOPMENT
    assert connection.base_url == "http://localhost:3000/api/openrouter/"
    assert connection.api_key == token

    recorded = events.list_events("endpoint")
    assert len(recorded) == 1
    assert recorded[0].name == "development"
    assert recorded[0].payload["decoded"] is True


def test_build_relay_connection_defaults_to_production_for_empty_token() -> None:
    connection = build_relay_connection(RelaySettings())
    assert connection.environment == RelayEnvironment.PRODUCTION
    assert connection.base_url == "https://kilocode.ai/api/openrouter/"


def test_auth_headers_require_token() -> None:
    assert build_relay_auth_headers(" tok ")["Authorization"] == "Bearer tok"
    with pytest.raises(ValueError):
        build_relay_auth_headers("  ")


def test_invalid_utf8_inside_payload_is_replaced() -> None:
    raw = b'{"env":"development","x":"\xff"}'
    token = f"h.{base64.b64encode(raw).decode('ascii')}.s"
    payload = decode_token_payload(token)
    assert payload is not None
    assert payload["x"] == "\ufffd"
    assert select_relay_environment(token) == RelayEnvironment.DEVELOPMENT
