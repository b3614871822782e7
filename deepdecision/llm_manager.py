"""LLM Manager for Deep Decision - creates the configured LLM provider."""

from typing import Any

from loguru import logger

from deepdecision.core.exceptions import ProviderConfigurationError
from deepdecision.interfaces.llm_provider import LLMProvider
from deepdecision.providers.llm import OllamaLLMProvider, OpenAILLMProvider

DEFAULT_PROVIDER_CLASSES: dict[str, type[LLMProvider]] = {
    "openai": OpenAILLMProvider,
    "ollama": OllamaLLMProvider,
}


class LLMManager:
    """Owns the active LLM provider, chosen once from configuration."""

    def __init__(
        self,
        provider_config: dict[str, Any],
        provider_classes: dict[str, type[LLMProvider]] | None = None,
    ):
        """Initialize LLM manager.

        Args:
            provider_config: Output of LLMConfig.get_provider_config(), optionally
                extended with trimmer settings such as min_chunk_size
            provider_classes: Provider implementations by name (defaults to the
                built-in openai and ollama providers)
        """
        self._provider_classes: dict[str, type[LLMProvider]] = dict(
            provider_classes or DEFAULT_PROVIDER_CLASSES
        )
        self._provider = self._create_provider(provider_config)
        logger.debug(
            f"LLM manager initialized with {self._provider.name} "
            f"({self._provider.model})"
        )

    def available_providers(self) -> list[str]:
        return sorted(self._provider_classes)

    def _create_provider(self, config: dict[str, Any]) -> LLMProvider:
        """Instantiate the provider named in config."""
        config = dict(config)
        provider_name = config.pop("provider", None)
        if not provider_name:
            raise ProviderConfigurationError(
                "No LLM provider configured. Set DEEPDECISION_LLM_API_KEY "
                "(or OPENAI_API_KEY), or enable Ollama."
            )

        provider_class = self._provider_classes.get(provider_name)
        if provider_class is None:
            raise ProviderConfigurationError(
                f"Unknown LLM provider: {provider_name}. "
                f"Available: {', '.join(self.available_providers())}"
            )

        if provider_name == "openai" and not config.get("api_key"):
            raise ProviderConfigurationError("OpenAI API key is required")
        if not config.get("model"):
            raise ProviderConfigurationError(f"{provider_name} model name is required")

        try:
            return provider_class(**config)
        except TypeError as e:
            raise ProviderConfigurationError(
                f"Invalid configuration for {provider_name}: {e}"
            ) from e

    def get_provider(self) -> LLMProvider:
        return self._provider

    def set_provider(self, provider: LLMProvider) -> None:
        """Replace the active provider."""
        self._provider = provider

    def get_model_id(self) -> str:
        return self._provider.model

    def get_provider_name(self) -> str:
        return self._provider.name
