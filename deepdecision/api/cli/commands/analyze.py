"""Analyze command module - interactive decision analysis."""

import argparse
import signal
import sys
from collections.abc import Callable
from typing import Any

from loguru import logger
from rich.prompt import IntPrompt, Prompt

from deepdecision.context import AppContext
from deepdecision.core.cancellation import CancellationToken
from deepdecision.core.exceptions import AnalysisCancelledError, GenerationError
from deepdecision.version import __version__

from ..utils.rich_output import RichOutputFormatter


def interrupt_handler(cancel_token: CancellationToken) -> Callable[[int, Any], None]:
    """Build a SIGINT handler that cancels the analysis instead of killing it.

    The first Ctrl+C cancels the token so the walk stops at its next check;
    a second one raises KeyboardInterrupt as usual.
    """

    def handle_sigint(signum: int, frame: Any) -> None:
        if cancel_token.cancelled:
            signal.default_int_handler(signum, frame)
        cancel_token.cancel("interrupted by user")

    return handle_sigint


def combine_problem(problem: str, questions: list[str], answers: list[str]) -> str:
    """Merge the initial problem with follow-up questions and answers."""
    if not questions:
        return problem

    qa = "\n\n".join(
        f"Q: {question}\nA: {answer}" for question, answer in zip(questions, answers)
    )
    return f"Initial decision problem: {problem}\n\nFollow-up questions and answers:\n{qa}\n"


async def analyze_command(args: argparse.Namespace, context: AppContext) -> None:
    """Execute the analyze command.

    Args:
        args: Parsed command-line arguments
        context: Application context built from validated configuration
    """
    formatter = RichOutputFormatter(verbose=args.verbose)
    decision_config = context.config.decision
    service = context.decision_service
    interactive = not args.no_interactive

    formatter.startup_info(__version__, context.provider_name, context.model_id)

    problem = args.problem
    if not problem:
        if not interactive:
            formatter.error("--problem is required with --no-interactive")
            sys.exit(1)
        problem = Prompt.ask("Enter the complex decision problem to analyze")
    if not problem or not problem.strip():
        formatter.error("A decision problem is required")
        sys.exit(1)

    breadth = args.breadth or decision_config.default_breadth
    depth = args.depth or decision_config.default_depth
    if interactive and not args.breadth:
        breadth = IntPrompt.ask(
            "Analysis breadth (recommended 3-6)", default=decision_config.default_breadth
        )
    if interactive and not args.depth:
        depth = IntPrompt.ask(
            "Analysis depth (recommended 2-5)", default=decision_config.default_depth
        )
    if breadth < 1 or depth < 1:
        formatter.error("Breadth and depth must be at least 1")
        sys.exit(1)

    combined_problem = problem
    if interactive and decision_config.default_questions > 0:
        formatter.info("Asking a few follow-up questions to understand the decision...")
        try:
            questions = await service.generate_feedback_questions(
                problem, decision_config.default_questions
            )
        except GenerationError as e:
            formatter.warning(f"Could not generate follow-up questions: {e}")
            questions = []

        answers = [Prompt.ask(f"\n{question}\nYour answer") for question in questions]
        combined_problem = combine_problem(problem, questions, answers)

    formatter.info("Starting decision analysis... (Ctrl+C to stop)")
    cancel_token = CancellationToken()
    previous_handler = signal.signal(signal.SIGINT, interrupt_handler(cancel_token))

    try:
        with formatter.create_progress_display() as progress:
            result = await service.analyze_decision(
                combined_problem,
                depth=depth,
                breadth=breadth,
                on_progress=progress.update,
                cancel_token=cancel_token,
            )
            progress.finish()
    except AnalysisCancelledError as e:
        formatter.warning(str(e))
        sys.exit(1)
    except GenerationError as e:
        formatter.error(f"Decision analysis failed: {e}")
        logger.exception("Analysis error details")
        sys.exit(1)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    tree = result.decision_tree
    formatter.success(
        f"Analyzed {tree.count_nodes()} decision nodes to depth {tree.max_depth()}"
    )
    if args.verbose:
        formatter.decision_tree(tree)

    store = context.result_store
    tree_path = store.save_tree(tree)
    formatter.info(f"Decision tree saved to {tree_path}")

    formatter.insights(result.insights)

    formatter.info("Generating decision analysis report...")
    report = await service.generate_report(combined_problem, tree, result.insights)
    report_path = store.save_report(report)
    formatter.success(f"Decision analysis report saved to {report_path}")


__all__: list[str] = ["analyze_command", "combine_problem"]
