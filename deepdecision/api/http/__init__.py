"""HTTP API for Deep Decision."""

from .app import create_app

__all__ = ["create_app"]
