"""Serve command argument parser for Deep Decision CLI."""

import argparse
from typing import Any, cast

from deepdecision.core.config.api_config import APIConfig
from deepdecision.core.config.decision_config import DecisionConfig
from deepdecision.core.config.llm_config import LLMConfig

from . import add_common_arguments


def add_serve_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add serve command subparser to the main parser."""
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API server",
        description="Start the Deep Decision HTTP API",
    )

    add_common_arguments(serve_parser)
    LLMConfig.add_cli_arguments(serve_parser)
    DecisionConfig.add_cli_arguments(serve_parser)
    APIConfig.add_cli_arguments(serve_parser)
    APIConfig.add_output_argument(serve_parser)

    return cast(argparse.ArgumentParser, serve_parser)


__all__: list[str] = ["add_serve_subparser"]
