"""
Pytest configuration and fixtures for Deep Decision tests.
"""

import os

import pytest

from deepdecision.context import AppContext, create_app_context
from deepdecision.core.config.config import Config
from tests.fixtures.fake_providers import FakeLLMProvider

# Variables read by the configuration layer outside the DEEPDECISION_ prefix
_UNPREFIXED_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_KEY",
    "DEFAULT_DEPTH",
    "DEFAULT_BREADTH",
    "DEFAULT_QUESTIONS",
    "RESPONSE_LANGUAGE",
    "API_PORT",
)


@pytest.fixture
def clean_environment(monkeypatch):
    """Remove every environment variable the configuration layer reads."""
    for key in list(os.environ.keys()):
        if key.startswith("DEEPDECISION_") or key in _UNPREFIXED_ENV_VARS:
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def fake_provider() -> FakeLLMProvider:
    """Scripted LLM provider producing two options per expansion."""
    return FakeLLMProvider(breadth=2)


@pytest.fixture
def app_context(clean_environment, tmp_path, fake_provider) -> AppContext:
    """Application context wired to the fake provider and a temp output dir."""
    config = Config(
        overrides={
            "api": {"output_dir": str(tmp_path)},
            "decision": {"default_depth": 2, "default_breadth": 2},
        }
    )
    return create_app_context(config, llm_provider=fake_provider)
