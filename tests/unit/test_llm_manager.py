"""Tests for provider creation from configuration."""

from types import SimpleNamespace

import pytest

from deepdecision.core.exceptions import GenerationError, ProviderConfigurationError
from deepdecision.core.models import ReportResponse
from deepdecision.llm_manager import LLMManager
from deepdecision.providers.llm import OllamaLLMProvider, OpenAILLMProvider
from deepdecision.providers.llm.openai_llm_provider import extract_json_payload
from tests.fixtures.fake_providers import FakeLLMProvider


class TestLLMManager:
    def test_creates_openai_provider(self):
        manager = LLMManager(
            {"provider": "openai", "api_key": "sk-test", "model": "o3-mini"}
        )

        provider = manager.get_provider()
        assert isinstance(provider, OpenAILLMProvider)
        assert manager.get_provider_name() == "openai"
        assert manager.get_model_id() == "o3-mini"

    def test_creates_ollama_provider(self):
        manager = LLMManager(
            {
                "provider": "ollama",
                "model": "llama3.2",
                "base_url": "http://localhost:11434/v1",
                "min_chunk_size": 200,
            }
        )

        assert isinstance(manager.get_provider(), OllamaLLMProvider)
        assert manager.get_provider_name() == "ollama"

    @pytest.mark.parametrize(
        "config,message",
        [
            ({"provider": None}, "No LLM provider"),
            ({"provider": "claude", "model": "x"}, "Unknown LLM provider"),
            ({"provider": "openai", "model": "o3-mini"}, "API key"),
            ({"provider": "ollama", "model": ""}, "model name"),
            ({"provider": "ollama", "model": "m", "bogus": 1}, "Invalid configuration"),
        ],
    )
    def test_configuration_errors(self, config, message):
        with pytest.raises(ProviderConfigurationError, match=message):
            LLMManager(config)

    def test_custom_provider_classes(self):
        manager = LLMManager(
            {"provider": "fake", "model": "fake-model"},
            provider_classes={"fake": lambda model: FakeLLMProvider()},
        )

        assert manager.available_providers() == ["fake"]
        assert manager.get_provider_name() == "fake"

    def test_set_provider(self):
        manager = LLMManager({"provider": "openai", "api_key": "k", "model": "m"})
        fake = FakeLLMProvider()

        manager.set_provider(fake)

        assert manager.get_provider() is fake


class TestOpenAIProvider:
    def test_extract_json_payload(self):
        assert extract_json_payload('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert extract_json_payload('  {"a": 1} ') == '{"a": 1}'

    async def test_call_failure_becomes_generation_error(self, monkeypatch):
        provider = OpenAILLMProvider(api_key="sk-test")

        async def boom(**kwargs):
            raise RuntimeError("connection refused")

        monkeypatch.setattr(provider._client.chat.completions, "create", boom)

        with pytest.raises(GenerationError, match="connection refused"):
            await provider.generate_structured("system", "prompt", ReportResponse)
        assert provider.get_usage_stats()["failed_requests"] == 1

    async def test_health_check_healthy(self, monkeypatch):
        provider = OpenAILLMProvider(api_key="sk-test", model="o3-mini")

        async def list_models():
            return SimpleNamespace(data=[SimpleNamespace(id="o3-mini")])

        monkeypatch.setattr(provider._client.models, "list", list_models)

        status = await provider.health_check()

        assert status == {
            "status": "healthy",
            "provider": "openai",
            "model": "o3-mini",
            "models_available": 1,
        }

    async def test_health_check_unhealthy(self, monkeypatch):
        provider = OllamaLLMProvider()

        async def list_models():
            raise ConnectionError("connection refused")

        monkeypatch.setattr(provider._client.models, "list", list_models)

        status = await provider.health_check()

        assert status["status"] == "unhealthy"
        assert status["provider"] == "ollama"
        assert "connection refused" in status["error"]
