"""Exception hierarchy for Deep Decision."""


class DeepDecisionError(Exception):
    """Base class for all Deep Decision errors."""


class GenerationError(DeepDecisionError):
    """Structured generation call failed (transport, parsing or validation)."""


class ProviderConfigurationError(DeepDecisionError):
    """LLM provider could not be created from the given configuration."""


class AnalysisCancelledError(DeepDecisionError):
    """Decision analysis was cancelled before completion."""
