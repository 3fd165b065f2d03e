from pathlib import Path
import base64
import json
import sys

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from kilo_relay.llm.models import ModelInfo


def make_token(payload: dict) -> str:
    encoded = base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")
    return f"header.{encoded}.signature"


@pytest.fixture
def catalog() -> dict[str, ModelInfo]:
    return {
        "google/gemini-2.5-pro-preview": ModelInfo(display_name="Gemini 2.5 Pro", max_tokens=65536),
        "openai/gpt-4.1": ModelInfo(display_name="GPT-4.1", max_tokens=32768),
        "anthropic/claude-3.7-sonnet": ModelInfo(
            display_name="Claude 3.7 Sonnet",
            max_tokens=8192,
            supports_reasoning_budget=True,
        ),
        "deepseek/deepseek-r1": ModelInfo(display_name="DeepSeek R1", max_tokens=8192),
        "deepseek/deepseek-r1-distill-llama-70b": ModelInfo(display_name="R1 Distill", max_tokens=4096),
        "perplexity/sonar-reasoning": ModelInfo(display_name="Sonar Reasoning"),
        "perplexity/sonar": ModelInfo(display_name="Sonar"),
    }
