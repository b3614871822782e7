"""Decision analysis configuration for Deep Decision."""

import argparse
import os
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deepdecision.core.prompts import SUPPORTED_LANGUAGES
from deepdecision.utils.prompt_trimmer import MIN_CHUNK_SIZE


class DecisionConfig(BaseSettings):
    """
    Defaults and limits for tree analysis.

    Environment Variables:
        DEEPDECISION_DECISION_DEFAULT_DEPTH=3
        DEEPDECISION_DECISION_DEFAULT_BREADTH=4
        DEEPDECISION_DECISION_DEFAULT_QUESTIONS=3
        DEEPDECISION_DECISION_LANGUAGE=en
        DEEPDECISION_DECISION_MIN_CHUNK_SIZE=140
        DEEPDECISION_DECISION_MAX_CONCURRENCY=8
    """

    model_config = SettingsConfigDict(
        env_prefix="DEEPDECISION_DECISION_",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    default_depth: int = Field(default=3, ge=1, le=10, description="Analysis depth")
    default_breadth: int = Field(
        default=4, ge=1, le=10, description="Options generated per expansion"
    )
    default_questions: int = Field(
        default=3, ge=0, le=10, description="Clarifying questions asked before analysis"
    )
    language: str = Field(default="en", description="Response language code")
    min_chunk_size: int = Field(
        default=MIN_CHUNK_SIZE,
        gt=0,
        description="Smallest prompt (in characters) the trimmer will cut down to",
    )
    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        description="Maximum concurrent generation calls (unbounded if unset)",
    )

    @field_validator("language")
    def validate_language(cls, v: str) -> str:  # noqa: N805
        """Normalize the language code; unknown codes fall back to English."""
        v = v.strip().lower()
        return v if v in SUPPORTED_LANGUAGES else "en"

    @classmethod
    def add_cli_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Add decision-related CLI arguments."""
        parser.add_argument(
            "--depth", type=int, help="Analysis depth (recommended 2-5)"
        )
        parser.add_argument(
            "--breadth", type=int, help="Options per expansion (recommended 3-6)"
        )
        parser.add_argument(
            "--questions",
            type=int,
            help="Number of clarifying questions to ask before analysis",
        )
        parser.add_argument(
            "--language",
            choices=sorted(SUPPORTED_LANGUAGES),
            help="Response language (default: en)",
        )
        parser.add_argument(
            "--max-concurrency",
            type=int,
            help="Maximum concurrent LLM calls during tree expansion",
        )

    @classmethod
    def load_from_env(cls) -> dict[str, Any]:
        """Load decision config from environment variables."""
        config: dict[str, Any] = {}

        # Legacy unprefixed names are still honoured
        if depth := os.getenv("DEEPDECISION_DECISION_DEFAULT_DEPTH") or os.getenv(
            "DEFAULT_DEPTH"
        ):
            config["default_depth"] = depth
        if breadth := os.getenv("DEEPDECISION_DECISION_DEFAULT_BREADTH") or os.getenv(
            "DEFAULT_BREADTH"
        ):
            config["default_breadth"] = breadth
        if questions := os.getenv(
            "DEEPDECISION_DECISION_DEFAULT_QUESTIONS"
        ) or os.getenv("DEFAULT_QUESTIONS"):
            config["default_questions"] = questions
        if language := os.getenv("DEEPDECISION_DECISION_LANGUAGE") or os.getenv(
            "RESPONSE_LANGUAGE"
        ):
            config["language"] = language

        return config

    @classmethod
    def extract_cli_overrides(cls, args: Any) -> dict[str, Any]:
        """Extract decision config from CLI arguments."""
        overrides: dict[str, Any] = {}

        if getattr(args, "depth", None):
            overrides["default_depth"] = args.depth
        if getattr(args, "breadth", None):
            overrides["default_breadth"] = args.breadth
        if getattr(args, "questions", None) is not None:
            overrides["default_questions"] = args.questions
        if getattr(args, "language", None):
            overrides["language"] = args.language
        if getattr(args, "max_concurrency", None):
            overrides["max_concurrency"] = args.max_concurrency

        return overrides
