"""Starlette application for the Deep Decision HTTP API."""

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware

from deepdecision.context import AppContext

from .routes import routes


def create_app(context: AppContext) -> Starlette:
    """Create the HTTP application bound to an application context."""
    app = Starlette(
        debug=context.config.debug,
        routes=routes,
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["*"],
                allow_headers=["*"],
            )
        ],
    )
    app.state.context = context
    return app
