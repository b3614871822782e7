"""User-facing front ends (CLI and HTTP)."""
