"""
LLM configuration for Deep Decision.

This module provides a type-safe, validated configuration system for LLM
providers with support for multiple configuration sources (environment
variables, config files, CLI arguments).
"""

import argparse
import os
from typing import Any, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deepdecision.utils.tokens import DEFAULT_ENCODING

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434/v1"


class LLMConfig(BaseSettings):
    """
    LLM configuration for Deep Decision.

    Configuration Sources (in order of precedence):
    1. CLI arguments
    2. Environment variables (DEEPDECISION_LLM_*)
    3. Config files
    4. Default values

    Environment Variables:
        DEEPDECISION_LLM_PROVIDER=openai
        DEEPDECISION_LLM_MODEL=o3-mini
        DEEPDECISION_LLM_API_KEY=sk-...   (OPENAI_API_KEY is also accepted)
        DEEPDECISION_LLM_BASE_URL=https://api.openai.com/v1
        DEEPDECISION_LLM_CONTEXT_SIZE=128000
        DEEPDECISION_LLM_OLLAMA_ENABLED=true
    """

    model_config = SettingsConfigDict(
        env_prefix="DEEPDECISION_LLM_",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore unknown fields for forward compatibility
    )

    provider: Literal["openai", "ollama"] = Field(
        default="openai", description="LLM provider (openai, ollama)"
    )

    model: str = Field(
        default="",  # Will be set by get_default_model() if empty
        description="Model used for every structured generation call",
    )

    api_key: SecretStr | None = Field(
        default=None, description="API key for authentication (openai only)"
    )

    base_url: str | None = Field(default=None, description="Base URL for the LLM API")

    ollama_enabled: bool = Field(
        default=False,
        description="Allow falling back to a local Ollama server when no API key is set",
    )

    context_size: int = Field(
        default=128_000, gt=0, description="Maximum prompt size in tokens"
    )

    encoding: str = Field(
        default=DEFAULT_ENCODING, description="tiktoken encoding used to count tokens"
    )

    reasoning_effort: Literal["low", "medium", "high"] | None = Field(
        default=None, description="Reasoning effort for reasoning-capable OpenAI models"
    )

    # Internal settings
    timeout: int = Field(default=120, gt=0, description="Internal timeout for LLM calls")
    max_retries: int = Field(default=3, ge=0, description="Internal max retries")

    @field_validator("base_url")
    def validate_base_url(cls, v: str | None) -> str | None:  # noqa: N805
        """Validate and normalize base URL."""
        if v is None:
            return v

        # Remove trailing slash for consistency
        v = v.rstrip("/")

        if not (v.startswith("http://") or v.startswith("https://")):
            raise ValueError("base_url must start with http:// or https://")

        return v

    def resolve_provider(self) -> str | None:
        """
        Pick the provider that can actually be used.

        OpenAI without an API key falls back to Ollama when Ollama is enabled;
        an explicitly selected Ollama provider is always usable.

        Returns:
            Provider name, or None if nothing is usable
        """
        if self.provider == "ollama":
            return "ollama"
        if self.api_key:
            return "openai"
        if self.ollama_enabled:
            return "ollama"
        return None

    def get_default_model(self, provider: str | None = None) -> str:
        """Default model name for a provider."""
        if (provider or self.provider) == "ollama":
            return "llama3.2"
        return "o3-mini"

    def get_default_base_url(self, provider: str | None = None) -> str:
        if (provider or self.provider) == "ollama":
            return DEFAULT_OLLAMA_BASE_URL
        return DEFAULT_OPENAI_BASE_URL

    def get_provider_config(self) -> dict[str, Any]:
        """
        Get the provider-specific configuration dictionary.

        Returns:
            Keyword arguments for the resolved provider; "provider" is None when
            no provider is configured
        """
        provider = self.resolve_provider()

        config: dict[str, Any] = {
            "provider": provider,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "context_size": self.context_size,
            "encoding": self.encoding,
        }

        # An explicit model/base URL only applies to the provider it was set for
        if provider == self.provider:
            config["model"] = self.model or self.get_default_model(provider)
            config["base_url"] = self.base_url or self.get_default_base_url(provider)
        else:
            config["model"] = self.get_default_model(provider)
            config["base_url"] = self.get_default_base_url(provider)

        if provider == "openai" and self.api_key:
            config["api_key"] = self.api_key.get_secret_value()
            if self.reasoning_effort:
                config["reasoning_effort"] = self.reasoning_effort

        return config

    def is_provider_configured(self) -> bool:
        return self.resolve_provider() is not None

    def get_missing_config(self) -> list[str]:
        """
        Get list of missing required configuration.

        Returns:
            List of missing configuration parameter names
        """
        missing = []

        if not self.is_provider_configured():
            missing.append(
                "api_key (set DEEPDECISION_LLM_API_KEY or OPENAI_API_KEY, "
                "or enable Ollama with DEEPDECISION_LLM_OLLAMA_ENABLED=true)"
            )

        return missing

    @classmethod
    def add_cli_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Add LLM-related CLI arguments."""
        parser.add_argument(
            "--llm-provider",
            choices=["openai", "ollama"],
            help="LLM provider (default: openai)",
        )

        parser.add_argument(
            "--llm-model",
            help="Model name (default depends on provider)",
        )

        parser.add_argument(
            "--llm-api-key",
            help="API key for LLM provider (uses env var if not specified)",
        )

        parser.add_argument(
            "--llm-base-url",
            help="Base URL for LLM API (uses env var if not specified)",
        )

        parser.add_argument(
            "--context-size",
            type=int,
            help="Maximum prompt size in tokens (default: 128000)",
        )

    @classmethod
    def load_from_env(cls) -> dict[str, Any]:
        """Load LLM config from environment variables."""
        config: dict[str, Any] = {}

        if api_key := (
            os.getenv("DEEPDECISION_LLM_API_KEY")
            or os.getenv("OPENAI_API_KEY")
            or os.getenv("OPENAI_KEY")
        ):
            config["api_key"] = api_key
        if base_url := os.getenv("DEEPDECISION_LLM_BASE_URL"):
            config["base_url"] = base_url
        if provider := os.getenv("DEEPDECISION_LLM_PROVIDER"):
            config["provider"] = provider
        if model := os.getenv("DEEPDECISION_LLM_MODEL"):
            config["model"] = model
        if context_size := os.getenv("DEEPDECISION_LLM_CONTEXT_SIZE"):
            config["context_size"] = context_size
        if ollama_enabled := os.getenv("DEEPDECISION_LLM_OLLAMA_ENABLED"):
            config["ollama_enabled"] = ollama_enabled.lower() in ("true", "1", "yes")

        return config

    @classmethod
    def extract_cli_overrides(cls, args: Any) -> dict[str, Any]:
        """Extract LLM config from CLI arguments."""
        overrides: dict[str, Any] = {}

        if getattr(args, "llm_provider", None):
            overrides["provider"] = args.llm_provider
        if getattr(args, "llm_model", None):
            overrides["model"] = args.llm_model
        if getattr(args, "llm_api_key", None):
            overrides["api_key"] = args.llm_api_key
        if getattr(args, "llm_base_url", None):
            overrides["base_url"] = args.llm_base_url
        if getattr(args, "context_size", None):
            overrides["context_size"] = args.context_size

        return overrides

    def __repr__(self) -> str:
        """String representation hiding sensitive information."""
        api_key_display = "***" if self.api_key else None
        return (
            f"LLMConfig("
            f"provider={self.provider}, "
            f"model={self.model or self.get_default_model()}, "
            f"api_key={api_key_display}, "
            f"base_url={self.base_url}, "
            f"context_size={self.context_size})"
        )
