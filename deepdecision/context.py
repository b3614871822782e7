"""Application context - the object graph created once at startup."""

from dataclasses import dataclass

from deepdecision.core.config.config import Config
from deepdecision.interfaces.llm_provider import LLMProvider
from deepdecision.llm_manager import LLMManager
from deepdecision.services.decision_service import DecisionService
from deepdecision.services.result_store import ResultStore


@dataclass
class AppContext:
    """Services shared by the CLI and HTTP front ends."""

    config: Config
    llm_provider: LLMProvider
    decision_service: DecisionService
    result_store: ResultStore

    @property
    def model_id(self) -> str:
        return self.llm_provider.model

    @property
    def provider_name(self) -> str:
        return self.llm_provider.name


def create_app_context(
    config: Config, llm_provider: LLMProvider | None = None
) -> AppContext:
    """Wire providers and services from configuration.

    Args:
        config: Validated configuration
        llm_provider: Pre-built provider (skips provider creation, used in tests)

    Raises:
        ProviderConfigurationError: If no usable LLM provider is configured
    """
    if llm_provider is None:
        provider_config = config.llm.get_provider_config()
        provider_config["min_chunk_size"] = config.decision.min_chunk_size
        llm_provider = LLMManager(provider_config).get_provider()

    decision_service = DecisionService(
        llm_provider,
        language=config.decision.language,
        max_concurrency=config.decision.max_concurrency,
    )

    return AppContext(
        config=config,
        llm_provider=llm_provider,
        decision_service=decision_service,
        result_store=ResultStore(config.api.output_dir),
    )
