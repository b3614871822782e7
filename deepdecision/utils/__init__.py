"""Text utilities: splitting, token counting and prompt trimming."""

from .prompt_trimmer import PromptTrimmer, trim_prompt
from .text_splitter import RecursiveCharacterTextSplitter, split_text

__all__ = ["PromptTrimmer", "RecursiveCharacterTextSplitter", "split_text", "trim_prompt"]
