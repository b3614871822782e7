"""Token-budget prompt trimming.

Shrinks a prompt until a tokenizer says it fits, using a character estimate
(about 3 characters per token) to pick a chunk size for the recursive text
splitter and keeping the first chunk. Estimates can be wrong in either
direction, so every pass re-measures; a hard minimum size ends the loop.
"""

from collections.abc import Callable

from loguru import logger

from deepdecision.utils.text_splitter import RecursiveCharacterTextSplitter

CHARS_PER_TOKEN = 3
MIN_CHUNK_SIZE = 140

TokenCounter = Callable[[str], int]


class PromptTrimmer:
    """Trim text to a token budget measured by an injected counter."""

    def __init__(
        self,
        count_tokens: TokenCounter,
        context_size: int = 128_000,
        min_chunk_size: int = MIN_CHUNK_SIZE,
    ):
        """Initialize the trimmer.

        Args:
            count_tokens: Callable returning the token count of a string
            context_size: Default token budget when trim() gets none
            min_chunk_size: Hard floor in characters; once the estimated
                character budget drops below it, the text is cut to this size
        """
        if min_chunk_size <= 0:
            raise ValueError(f"min_chunk_size must be positive, got {min_chunk_size}")

        self._count_tokens = count_tokens
        self._context_size = context_size
        self._min_chunk_size = min_chunk_size

    @property
    def context_size(self) -> int:
        return self._context_size

    @property
    def min_chunk_size(self) -> int:
        return self._min_chunk_size

    def trim(self, text: str, token_budget: int | None = None) -> str:
        """Return text shortened until it fits within token_budget tokens.

        Args:
            text: Prompt text
            token_budget: Maximum tokens (defaults to the configured context size)

        Returns:
            The original text when it already fits, otherwise a prefix-preserving
            trimmed version no shorter than the configured minimum chunk size
        """
        if not text:
            return ""

        budget = self._context_size if token_budget is None else token_budget
        passes = 0

        while True:
            tokens = self._count_tokens(text)
            if tokens <= budget:
                if passes:
                    logger.debug(
                        f"Trimmed prompt to {len(text):,} chars / {tokens:,} tokens "
                        f"in {passes} pass(es)"
                    )
                return text

            passes += 1
            overflow_tokens = tokens - budget
            char_budget = len(text) - overflow_tokens * CHARS_PER_TOKEN
            if char_budget < self._min_chunk_size:
                return text[: self._min_chunk_size]

            splitter = RecursiveCharacterTextSplitter(
                chunk_size=char_budget, chunk_overlap=0
            )
            chunks = splitter.split_text(text)
            trimmed = chunks[0] if chunks else ""

            if len(trimmed) == len(text) or len(trimmed) < self._min_chunk_size:
                # Splitter made no progress or kept too little; cut directly
                trimmed = text[:char_budget]

            text = trimmed


def trim_prompt(
    text: str,
    token_budget: int,
    count_tokens: TokenCounter,
    min_chunk_size: int = MIN_CHUNK_SIZE,
) -> str:
    """Trim text to token_budget using a one-off PromptTrimmer."""
    trimmer = PromptTrimmer(
        count_tokens, context_size=token_budget, min_chunk_size=min_chunk_size
    )
    return trimmer.trim(text)
