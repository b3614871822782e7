"""Core domain types, prompts and configuration."""
