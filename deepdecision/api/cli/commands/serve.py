"""Serve command module - runs the HTTP API with uvicorn."""

import argparse

import uvicorn
from loguru import logger

from deepdecision.api.http import create_app
from deepdecision.context import AppContext


async def serve_command(args: argparse.Namespace, context: AppContext) -> None:
    """Execute the serve command.

    Args:
        args: Parsed command-line arguments
        context: Application context built from validated configuration
    """
    api_config = context.config.api
    app = create_app(context)

    logger.info(
        f"Deep Decision API running on http://{api_config.host}:{api_config.port} "
        f"({context.provider_name}/{context.model_id})"
    )

    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=api_config.host,
            port=api_config.port,
            log_level="debug" if args.verbose else "info",
        )
    )
    await server.serve()


__all__: list[str] = ["serve_command"]
