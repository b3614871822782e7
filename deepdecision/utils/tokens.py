"""Token counting backed by tiktoken encodings."""

from functools import lru_cache

import tiktoken

DEFAULT_ENCODING = "o200k_base"


@lru_cache(maxsize=8)
def get_encoding(name: str = DEFAULT_ENCODING) -> tiktoken.Encoding:
    """Load (and cache) a tiktoken encoding by name."""
    return tiktoken.get_encoding(name)


class TiktokenCounter:
    """Callable token counter bound to one encoding."""

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self._encoding_name = encoding

    @property
    def encoding_name(self) -> str:
        return self._encoding_name

    def __call__(self, text: str) -> int:
        if not text:
            return 0
        # Special tokens in user text are counted as plain text
        return len(get_encoding(self._encoding_name).encode(text, disallowed_special=()))
