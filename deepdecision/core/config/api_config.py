"""HTTP API configuration for Deep Decision."""

import argparse
import os
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class APIConfig(BaseSettings):
    """
    HTTP server settings and output location for persisted results.

    Environment Variables:
        DEEPDECISION_API_HOST=127.0.0.1
        DEEPDECISION_API_PORT=8080   (API_PORT is also accepted)
        DEEPDECISION_API_OUTPUT_DIR=.
    """

    model_config = SettingsConfigDict(
        env_prefix="DEEPDECISION_API_",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    host: str = Field(default="127.0.0.1", description="Host to bind to")
    port: int = Field(default=8080, ge=1, le=65535, description="Port to bind to")
    output_dir: Path = Field(
        default=Path("."), description="Directory for decision-tree.json and the report"
    )

    @classmethod
    def add_cli_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Add API-related CLI arguments."""
        parser.add_argument("--host", help="Host to bind to (default: 127.0.0.1)")
        parser.add_argument("--port", type=int, help="Port to bind to (default: 8080)")

    @classmethod
    def add_output_argument(cls, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--output-dir",
            type=Path,
            help="Directory where the decision tree and report are written",
        )

    @classmethod
    def load_from_env(cls) -> dict[str, Any]:
        config: dict[str, Any] = {}

        if host := os.getenv("DEEPDECISION_API_HOST"):
            config["host"] = host
        if port := os.getenv("DEEPDECISION_API_PORT") or os.getenv("API_PORT"):
            config["port"] = port
        if output_dir := os.getenv("DEEPDECISION_API_OUTPUT_DIR"):
            config["output_dir"] = output_dir

        return config

    @classmethod
    def extract_cli_overrides(cls, args: Any) -> dict[str, Any]:
        overrides: dict[str, Any] = {}

        if getattr(args, "host", None):
            overrides["host"] = args.host
        if getattr(args, "port", None):
            overrides["port"] = args.port
        if getattr(args, "output_dir", None):
            overrides["output_dir"] = args.output_dir

        return overrides
