"""Argument parsers for the Deep Decision CLI."""

import argparse
from typing import Any

from deepdecision.version import __version__


def create_main_parser() -> argparse.ArgumentParser:
    """Create the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="deepdecision",
        description="Deep Decision - LLM-driven decision tree analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"deepdecision {__version__}"
    )
    return parser


def setup_subparsers(parser: argparse.ArgumentParser) -> Any:
    """Attach the command subparsers container."""
    return parser.add_subparsers(dest="command", help="Available commands")


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by every command."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--config",
        help="JSON configuration file path",
    )


__all__: list[str] = ["add_common_arguments", "create_main_parser", "setup_subparsers"]
