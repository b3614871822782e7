"""Ollama LLM provider for Deep Decision.

Talks to Ollama through its OpenAI-compatible endpoint, which accepts the
same JSON-schema response format as OpenAI.
"""

from deepdecision.providers.llm.openai_llm_provider import OpenAILLMProvider
from deepdecision.utils.prompt_trimmer import MIN_CHUNK_SIZE
from deepdecision.utils.tokens import DEFAULT_ENCODING

# Ollama ignores the key, but the OpenAI client refuses to start without one
OLLAMA_PLACEHOLDER_API_KEY = "ollama"


class OllamaLLMProvider(OpenAILLMProvider):
    """Local Ollama models served over the OpenAI-compatible API."""

    def __init__(
        self,
        model: str = "llama3.2",
        base_url: str = "http://localhost:11434/v1",
        timeout: int = 300,
        max_retries: int = 1,
        context_size: int = 128_000,
        encoding: str = DEFAULT_ENCODING,
        min_chunk_size: int = MIN_CHUNK_SIZE,
    ):
        super().__init__(
            api_key=OLLAMA_PLACEHOLDER_API_KEY,
            model=model,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            context_size=context_size,
            encoding=encoding,
            min_chunk_size=min_chunk_size,
        )

    @property
    def name(self) -> str:
        return "ollama"
