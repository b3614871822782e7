"""Command-line interface for Deep Decision."""
