"""Configuration package for Deep Decision."""

from .api_config import APIConfig
from .config import Config
from .decision_config import DecisionConfig
from .llm_config import LLMConfig

__all__ = ["APIConfig", "Config", "DecisionConfig", "LLMConfig"]
