"""Tests for token-budget prompt trimming."""

import pytest

from deepdecision.utils.prompt_trimmer import MIN_CHUNK_SIZE, PromptTrimmer, trim_prompt


def three_chars_per_token(text: str) -> int:
    return len(text) // 3


def one_char_per_token(text: str) -> int:
    return len(text)


class TestPromptTrimmer:
    """Fixed-point trimming against an injected token counter."""

    def test_identity_when_within_budget(self):
        text = "Keep me exactly as I am.\n\nPlease."
        assert trim_prompt(text, 1000, one_char_per_token) == text

    def test_empty_text(self):
        assert PromptTrimmer(one_char_per_token).trim("") == ""

    def test_trims_on_paragraph_boundaries(self):
        paragraph = "p" * 99
        text = "\n\n".join(paragraph for _ in range(100))

        trimmed = trim_prompt(text, 1000, three_chars_per_token)

        assert three_chars_per_token(trimmed) <= 1000
        assert text.startswith(trimmed)
        assert trimmed.endswith(paragraph)
        assert len(trimmed) >= MIN_CHUNK_SIZE

    def test_no_separators(self):
        text = "z" * 3000

        trimmed = trim_prompt(text, 500, three_chars_per_token)

        assert three_chars_per_token(trimmed) <= 500
        assert text.startswith(trimmed)

    def test_adversarial_input_hits_floor(self):
        text = "x" * 10_000

        trimmed = trim_prompt(text, 10, one_char_per_token)

        assert trimmed == "x" * MIN_CHUNK_SIZE

    def test_dense_script_terminates(self):
        # One token per character defeats the 3 chars/token estimate
        text = "决" * 5000

        trimmed = trim_prompt(text, 2000, one_char_per_token)

        assert one_char_per_token(trimmed) <= 2000
        assert len(trimmed) >= MIN_CHUNK_SIZE

    def test_custom_floor(self):
        trimmed = trim_prompt("y" * 1000, 5, one_char_per_token, min_chunk_size=20)
        assert trimmed == "y" * 20

    def test_default_budget_is_context_size(self):
        trimmer = PromptTrimmer(one_char_per_token, context_size=300)

        assert trimmer.trim("w" * 200) == "w" * 200
        assert len(trimmer.trim("w " * 400)) < 800

    def test_invalid_floor(self):
        with pytest.raises(ValueError):
            PromptTrimmer(one_char_per_token, min_chunk_size=0)
