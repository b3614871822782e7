"""OpenAI LLM provider implementation for Deep Decision."""

from typing import Any

from loguru import logger
from openai import AsyncOpenAI
from pydantic import ValidationError

from deepdecision.core.exceptions import GenerationError
from deepdecision.interfaces.llm_provider import LLMProvider, SchemaT
from deepdecision.utils.prompt_trimmer import MIN_CHUNK_SIZE, PromptTrimmer
from deepdecision.utils.tokens import DEFAULT_ENCODING, TiktokenCounter


def extract_json_payload(content: str) -> str:
    """Strip a surrounding markdown code fence from a model response."""
    text = content.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


class OpenAILLMProvider(LLMProvider):
    """OpenAI LLM provider using structured (JSON schema) outputs."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "o3-mini",
        base_url: str | None = None,
        timeout: int = 120,
        max_retries: int = 3,
        context_size: int = 128_000,
        encoding: str = DEFAULT_ENCODING,
        min_chunk_size: int = MIN_CHUNK_SIZE,
        reasoning_effort: str | None = None,
    ):
        """Initialize OpenAI LLM provider.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            model: Model name to use
            base_url: Base URL for OpenAI API (optional for custom endpoints)
            timeout: Request timeout in seconds
            max_retries: Number of retry attempts for failed requests
            context_size: Maximum prompt size in tokens
            encoding: tiktoken encoding used for token counting
            min_chunk_size: Smallest prompt (characters) trimming may produce
            reasoning_effort: Optional reasoning effort for reasoning models
        """
        self._model = model
        self._timeout = timeout
        self._max_retries = max_retries
        self._context_size = context_size
        self._reasoning_effort = reasoning_effort

        client_kwargs: dict[str, Any] = {
            "api_key": api_key,
            "timeout": timeout,
            "max_retries": max_retries,
        }
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = AsyncOpenAI(**client_kwargs)

        self._token_counter = TiktokenCounter(encoding)
        self._trimmer = PromptTrimmer(
            self.count_tokens,
            context_size=context_size,
            min_chunk_size=min_chunk_size,
        )

        # Usage tracking
        self._requests_made = 0
        self._failed_requests = 0
        self._tokens_used = 0
        self._prompt_tokens = 0
        self._completion_tokens = 0

    @property
    def name(self) -> str:
        """Provider name."""
        return "openai"

    @property
    def model(self) -> str:
        """Model name."""
        return self._model

    @property
    def context_size(self) -> int:
        return self._context_size

    def _request_options(self) -> dict[str, Any]:
        """Provider-specific request parameters."""
        if self._reasoning_effort:
            return {"reasoning_effort": self._reasoning_effort}
        return {}

    async def generate_structured(
        self,
        system: str,
        prompt: str,
        schema: type[SchemaT],
    ) -> SchemaT:
        """Generate a JSON object that validates against schema."""
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ]
        response_format = {
            "type": "json_schema",
            "json_schema": {
                "name": schema.__name__,
                "schema": schema.model_json_schema(),
            },
        }

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                response_format=response_format,
                **self._request_options(),
            )
        except Exception as e:
            self._failed_requests += 1
            logger.error(f"{self.name} structured generation failed: {e}")
            raise GenerationError(f"LLM generation failed: {e}") from e

        self._requests_made += 1
        if response.usage:
            self._prompt_tokens += response.usage.prompt_tokens
            self._completion_tokens += response.usage.completion_tokens
            self._tokens_used += response.usage.total_tokens

        choice = response.choices[0]
        content = choice.message.content or ""
        if not content.strip():
            raise GenerationError(
                f"LLM returned empty content (finish_reason={choice.finish_reason})"
            )

        try:
            return schema.model_validate_json(extract_json_payload(content))
        except ValidationError as e:
            logger.debug(f"Unparseable {schema.__name__} payload: {content[:500]}")
            raise GenerationError(
                f"LLM output did not match {schema.__name__}: {e}"
            ) from e

    def count_tokens(self, text: str) -> int:
        """Count tokens with the configured tiktoken encoding."""
        return self._token_counter(text)

    def trim_prompt(self, prompt: str, context_size: int | None = None) -> str:
        return self._trimmer.trim(prompt, context_size)

    async def health_check(self) -> dict[str, Any]:
        """Perform health check."""
        try:
            models = await self._client.models.list()
            return {
                "status": "healthy",
                "provider": self.name,
                "model": self._model,
                "models_available": len(models.data),
            }
        except Exception as e:
            return {
                "status": "unhealthy",
                "provider": self.name,
                "error": str(e),
            }

    def get_usage_stats(self) -> dict[str, Any]:
        """Get usage statistics."""
        return {
            "requests_made": self._requests_made,
            "failed_requests": self._failed_requests,
            "total_tokens": self._tokens_used,
            "prompt_tokens": self._prompt_tokens,
            "completion_tokens": self._completion_tokens,
        }
