"""Analyze command argument parser for Deep Decision CLI."""

import argparse
from typing import Any, cast

from deepdecision.core.config.api_config import APIConfig
from deepdecision.core.config.decision_config import DecisionConfig
from deepdecision.core.config.llm_config import LLMConfig

from . import add_common_arguments


def add_analyze_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add analyze command subparser to the main parser.

    Args:
        subparsers: Subparsers object from the main argument parser

    Returns:
        The configured analyze subparser
    """
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a decision interactively",
        description=(
            "Ask for a decision problem, gather context with follow-up questions, "
            "build and expand a decision tree, and write the tree and report"
        ),
    )

    analyze_parser.add_argument(
        "--problem",
        help="Decision problem (prompted for if omitted)",
    )
    analyze_parser.add_argument(
        "--no-interactive",
        action="store_true",
        help="Do not prompt; use --problem and configured defaults only",
    )

    add_common_arguments(analyze_parser)
    LLMConfig.add_cli_arguments(analyze_parser)
    DecisionConfig.add_cli_arguments(analyze_parser)
    APIConfig.add_output_argument(analyze_parser)

    return cast(argparse.ArgumentParser, analyze_parser)


__all__: list[str] = ["add_analyze_subparser"]
