"""Tests for CLI parsing and the analyze command."""

import signal

import pytest

from deepdecision.api.cli.commands.analyze import (
    analyze_command,
    combine_problem,
    interrupt_handler,
)
from deepdecision.api.cli.main import create_parser, validate_args_and_config
from deepdecision.core.cancellation import CancellationToken
from deepdecision.core.models import FeedbackQuestionsResponse


class TestParser:
    def test_analyze_arguments(self):
        args = create_parser().parse_args(
            ["analyze", "--problem", "Move?", "--depth", "2", "--breadth", "3",
             "--no-interactive", "--llm-provider", "ollama"]
        )

        assert args.command == "analyze"
        assert args.problem == "Move?"
        assert args.depth == 2
        assert args.breadth == 3
        assert args.no_interactive is True
        assert args.llm_provider == "ollama"

    def test_serve_arguments(self):
        args = create_parser().parse_args(["serve", "--port", "9001", "-v"])

        assert args.command == "serve"
        assert args.port == 9001
        assert args.verbose is True

    def test_validation_requires_provider(self, clean_environment):
        args = create_parser().parse_args(["analyze", "--problem", "Move?"])

        config, errors = validate_args_and_config(args)

        assert config is not None
        assert any("api_key" in error for error in errors)

    def test_validation_with_ollama(self, clean_environment):
        args = create_parser().parse_args(["serve", "--llm-provider", "ollama"])

        config, errors = validate_args_and_config(args)

        assert errors == []
        assert config.llm.get_provider_config()["provider"] == "ollama"

    def test_invalid_config_file(self, clean_environment, tmp_path):
        args = create_parser().parse_args(
            ["analyze", "--config", str(tmp_path / "missing.json")]
        )

        config, errors = validate_args_and_config(args)

        assert config is None
        assert errors


class TestCombineProblem:
    def test_without_questions(self):
        assert combine_problem("Move?", [], []) == "Move?"

    def test_with_answers(self):
        combined = combine_problem("Move?", ["Budget?"], ["Tight"])

        assert combined.startswith("Initial decision problem: Move?")
        assert "Q: Budget?\nA: Tight" in combined


class TestAnalyzeCommand:
    async def test_non_interactive_run_writes_results(self, app_context, fake_provider):
        args = create_parser().parse_args(
            ["analyze", "--problem", "Move?", "--no-interactive",
             "--depth", "2", "--breadth", "2"]
        )

        await analyze_command(args, app_context)

        store = app_context.result_store
        assert store.load_tree().count_nodes() == 7
        assert store.load_report().startswith("# Decision Analysis Report")
        # Follow-up questions are only asked interactively
        assert fake_provider.calls_for(FeedbackQuestionsResponse) == []

    async def test_non_interactive_requires_problem(self, app_context):
        args = create_parser().parse_args(["analyze", "--no-interactive"])

        with pytest.raises(SystemExit):
            await analyze_command(args, app_context)

    async def test_interrupt_handler_restored(self, app_context):
        before = signal.getsignal(signal.SIGINT)
        args = create_parser().parse_args(
            ["analyze", "--problem", "Move?", "--no-interactive",
             "--depth", "1", "--breadth", "2"]
        )

        await analyze_command(args, app_context)

        assert signal.getsignal(signal.SIGINT) is before


class TestInterruptHandler:
    def test_first_interrupt_cancels_token(self):
        token = CancellationToken()
        handler = interrupt_handler(token)

        handler(signal.SIGINT, None)

        assert token.cancelled
        assert token.reason == "interrupted by user"

    def test_second_interrupt_raises(self):
        token = CancellationToken()
        handler = interrupt_handler(token)
        handler(signal.SIGINT, None)

        with pytest.raises(KeyboardInterrupt):
            handler(signal.SIGINT, None)
