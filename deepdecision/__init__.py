"""Deep Decision - LLM-driven decision tree analysis."""

from .version import __version__

__all__ = ["__version__"]
