"""Recursive character text splitter used to keep prompts within budget.

Splits text on a hierarchy of separators (paragraph, line, word) and falls
back to fixed-width windowing when no separator produces more than one chunk.
Chunks preserve the original order; nothing is dropped.
"""

DEFAULT_CHUNK_SIZE = 4000
DEFAULT_CHUNK_OVERLAP = 200
DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", " ", "")


class RecursiveCharacterTextSplitter:
    """Split text into size-bounded chunks, preferring the coarsest separator."""

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        separators: list[str] | tuple[str, ...] | None = None,
    ):
        """Initialize the splitter.

        Args:
            chunk_size: Maximum characters per chunk
            chunk_overlap: Characters shared between consecutive windows when
                falling back to fixed-width splitting
            separators: Separators ordered coarsest to finest. An empty string
                means per-character windowing.
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap must be in [0, chunk_size), got {chunk_overlap}"
            )

        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._separators = list(
            separators if separators is not None else DEFAULT_SEPARATORS
        )

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    def split_text(self, text: str) -> list[str]:
        """Split text into ordered chunks no longer than chunk_size.

        Args:
            text: Text to split

        Returns:
            List of chunks (empty list for empty text)
        """
        if not text:
            return []

        if len(text) <= self._chunk_size:
            return [text]

        return self._split_recursive(text)

    def _split_recursive(self, text: str) -> list[str]:
        final_chunks: list[str] = []

        for separator in self._separators:
            if separator == "":
                chunks = self._split_by_size(text)
            elif separator in text:
                chunks = self._merge_splits(text.split(separator), separator)
            else:
                continue

            if len(chunks) > 1:
                final_chunks = chunks
                break

        if not final_chunks:
            final_chunks = self._split_by_size(text)

        # A single segment longer than chunk_size survives merging intact
        result: list[str] = []
        for chunk in final_chunks:
            if len(chunk) > self._chunk_size:
                result.extend(self._split_recursive(chunk))
            else:
                result.append(chunk)

        return result

    def _merge_splits(self, splits: list[str], separator: str) -> list[str]:
        """Greedily pack separator-delimited segments into runs."""
        merged: list[str] = []
        current = ""

        for segment in splits:
            if segment == "":
                continue

            candidate = segment if current == "" else f"{current}{separator}{segment}"
            if len(candidate) <= self._chunk_size:
                current = candidate
            else:
                if current != "":
                    merged.append(current)
                current = segment

        if current != "":
            merged.append(current)

        return merged

    def _split_by_size(self, text: str) -> list[str]:
        """Slide a fixed window over the raw text, advancing by size - overlap."""
        step = self._chunk_size - self._chunk_overlap
        return [
            text[start : start + self._chunk_size]
            for start in range(0, len(text), step)
        ]


def split_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
    separators: list[str] | tuple[str, ...] | None = None,
) -> list[str]:
    """Split text into chunks using a one-off RecursiveCharacterTextSplitter."""
    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size, chunk_overlap=overlap, separators=separators
    )
    return splitter.split_text(text)
