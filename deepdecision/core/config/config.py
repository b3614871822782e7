"""Centralized configuration management for Deep Decision.

This module provides a unified configuration system with clear precedence:
1. CLI arguments (highest priority)
2. Config file (via --config path)
3. Environment variables
4. Default values (lowest priority)
"""

import copy
import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .api_config import APIConfig
from .decision_config import DecisionConfig
from .llm_config import LLMConfig

_SECTIONS: dict[str, type] = {
    "llm": LLMConfig,
    "decision": DecisionConfig,
    "api": APIConfig,
}


class Config(BaseModel):
    """Centralized configuration for Deep Decision."""

    model_config = ConfigDict(validate_assignment=True)

    llm: LLMConfig = Field(default_factory=LLMConfig)
    decision: DecisionConfig = Field(default_factory=DecisionConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    debug: bool = Field(default=False)

    def __init__(
        self,
        config_file: Path | None = None,
        overrides: dict[str, Any] | None = None,
        **kwargs: Any,
    ):
        """Initialize configuration with hierarchical loading.

        Args:
            config_file: Optional path to a JSON configuration file (from --config)
            overrides: Optional dictionary of CLI overrides
            **kwargs: Additional keyword arguments (same shape as overrides)
        """
        config_data: dict[str, Any] = self._load_env_vars()

        if config_file is not None:
            if not config_file.exists():
                raise ValueError(f"Config file not found: {config_file}")
            try:
                with open(config_file) as f:
                    file_config = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(
                    f"Invalid JSON in config file {config_file}: {e}. "
                    "Please check the file format and try again."
                ) from e
            self._deep_merge(config_data, file_config)

        if overrides:
            self._deep_merge(config_data, overrides)

        if kwargs:
            self._deep_merge(config_data, kwargs)

        # Settings sections are built directly so their own validation runs
        for section, section_cls in _SECTIONS.items():
            value = config_data.get(section)
            if value is None or isinstance(value, dict):
                config_data[section] = section_cls(**(value or {}))

        super().__init__(**config_data)

    @staticmethod
    def _load_env_vars() -> dict[str, Any]:
        """Load configuration from environment variables."""
        config: dict[str, Any] = {}

        if debug := os.getenv("DEEPDECISION_DEBUG"):
            config["debug"] = debug.lower() in ("true", "1", "yes")

        for section, section_cls in _SECTIONS.items():
            values = section_cls.load_from_env()
            if values:
                config[section] = values

        return config

    @staticmethod
    def _deep_merge(base: dict[str, Any], update: dict[str, Any]) -> None:
        """Recursively merge update into base in place."""
        for key, value in update.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                Config._deep_merge(base[key], value)
            else:
                base[key] = copy.deepcopy(value)

    @classmethod
    def from_args(cls, args: Any) -> "Config":
        """Build configuration from parsed CLI arguments."""
        overrides: dict[str, Any] = {}
        for section, section_cls in _SECTIONS.items():
            section_overrides = section_cls.extract_cli_overrides(args)
            if section_overrides:
                overrides[section] = section_overrides

        if getattr(args, "verbose", False):
            overrides["debug"] = True

        config_file = getattr(args, "config", None)
        return cls(
            config_file=Path(config_file) if config_file else None,
            overrides=overrides,
        )

    def validate_for_command(self, command: str) -> list[str]:
        """Return human-readable configuration errors for a CLI command."""
        errors: list[str] = []
        if command in ("analyze", "serve"):
            errors.extend(self.llm.get_missing_config())
        return errors
