"""CLI entry point for Deep Decision."""

import argparse
import asyncio
import sys

from loguru import logger
from pydantic import ValidationError

from deepdecision.core.config.config import Config
from deepdecision.core.exceptions import ProviderConfigurationError


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI.

    Args:
        verbose: Whether to enable verbose logging
    """
    logger.remove()

    if verbose:
        logger.add(
            sys.stderr,
            level="DEBUG",
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                "<level>{message}</level>"
            ),
        )
    else:
        logger.add(
            sys.stderr,
            level="INFO",
            format=(
                "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
                "<level>{message}</level>"
            ),
        )


def validate_args_and_config(args: argparse.Namespace) -> tuple[Config | None, list[str]]:
    """Validate command-line arguments and create config.

    Args:
        args: Parsed arguments to validate

    Returns:
        tuple: (config, validation_errors)
    """
    try:
        config = Config.from_args(args)
    except (ValidationError, ValueError) as e:
        return None, [f"Invalid configuration: {e}"]

    validation_errors = config.validate_for_command(args.command)

    if getattr(args, "breadth", None) is not None and args.breadth < 1:
        validation_errors.append("--breadth must be at least 1")
    if getattr(args, "depth", None) is not None and args.depth < 1:
        validation_errors.append("--depth must be at least 1")

    return config, validation_errors


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the complete argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    from .parsers import create_main_parser, setup_subparsers
    from .parsers.analyze_parser import add_analyze_subparser
    from .parsers.serve_parser import add_serve_subparser

    parser = create_main_parser()
    subparsers = setup_subparsers(parser)

    add_analyze_subparser(subparsers)
    add_serve_subparser(subparsers)

    return parser


async def async_main(argv: list[str] | None = None) -> None:
    """Async main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(getattr(args, "verbose", False))

    config, validation_errors = validate_args_and_config(args)

    if validation_errors or config is None:
        for error in validation_errors:
            logger.error(f"Error: {error}")
        sys.exit(1)

    # Imported late so --help stays fast
    from deepdecision.context import create_app_context

    try:
        context = create_app_context(config)
    except ProviderConfigurationError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    try:
        if args.command == "analyze":
            from .commands.analyze import analyze_command

            await analyze_command(args, context)
        elif args.command == "serve":
            from .commands.serve import serve_command

            await serve_command(args, context)
        else:
            logger.error(f"Unknown command: {args.command}")
            sys.exit(1)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Command failed: {e}")
        logger.exception("Full error details:")
        sys.exit(1)


def main() -> None:
    """Main entry point for the CLI."""
    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
