"""Version information for Deep Decision."""

__version__ = "0.1.0"
