"""LLM Provider Interface for Deep Decision."""

from abc import ABC, abstractmethod
from typing import Any, TypeVar

from pydantic import BaseModel

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'openai', 'ollama')."""
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier."""
        ...

    @property
    @abstractmethod
    def context_size(self) -> int:
        """Maximum prompt size in tokens."""
        ...

    @abstractmethod
    async def generate_structured(
        self,
        system: str,
        prompt: str,
        schema: type[SchemaT],
    ) -> SchemaT:
        """
        Generate an object matching a pydantic schema.

        Args:
            system: System prompt
            prompt: User prompt
            schema: Pydantic model describing (and validating) the output

        Returns:
            Validated instance of schema

        Raises:
            GenerationError: If the call fails or the output does not validate
        """
        ...

    @abstractmethod
    def count_tokens(self, text: str) -> int:
        """
        Count tokens for text with the provider's tokenizer.

        Args:
            text: Text to measure

        Returns:
            Token count
        """
        ...

    @abstractmethod
    def trim_prompt(self, prompt: str, context_size: int | None = None) -> str:
        """
        Trim a prompt so it fits within context_size tokens.

        Args:
            prompt: Prompt text
            context_size: Token budget (defaults to the provider's context size)

        Returns:
            Prompt unchanged if it fits, otherwise a trimmed prefix
        """
        ...

    @abstractmethod
    async def health_check(self) -> dict[str, Any]:
        """
        Perform health check.

        Returns:
            Health status dictionary
        """
        ...

    @abstractmethod
    def get_usage_stats(self) -> dict[str, Any]:
        """
        Get usage statistics.

        Returns:
            Usage stats dictionary
        """
        ...
