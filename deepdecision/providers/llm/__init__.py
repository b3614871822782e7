"""LLM providers for Deep Decision."""

from .ollama_llm_provider import OllamaLLMProvider
from .openai_llm_provider import OpenAILLMProvider

__all__ = ["OllamaLLMProvider", "OpenAILLMProvider"]
