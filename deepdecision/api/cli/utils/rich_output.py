"""Rich-based output formatting utilities for Deep Decision CLI commands."""

from typing import Optional

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.tree import Tree

from deepdecision.core.models import DecisionNode, DecisionProgress

MAX_BRANCH_DISPLAY = 80


class RichOutputFormatter:
    """Terminal UI formatter using Rich library."""

    def __init__(self, verbose: bool = False, console: Console | None = None):
        """Initialize Rich output formatter.

        Args:
            verbose: Whether to enable verbose output
            console: Console to write to (defaults to a new stdout console)
        """
        self.verbose = verbose
        self.console = console or Console()

    def info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(f"[blue][INFO][/blue] {message}")

    def success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green][SUCCESS][/green] {message}")

    def warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"[yellow][WARN][/yellow] {message}")

    def error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red][ERROR][/red] {message}", style="red")

    def startup_info(self, version: str, provider: str, model: str) -> None:
        """Display startup information in a styled panel."""
        info_table = Table.grid(padding=(0, 2))
        info_table.add_column(style="cyan")
        info_table.add_column()

        info_table.add_row("Version:", f"[green]{version}[/green]")
        info_table.add_row("Provider:", f"[yellow]{provider}[/yellow]")
        info_table.add_row("Model:", f"[magenta]{model}[/magenta]")

        panel = Panel(
            info_table,
            title="[bold cyan]Deep Decision[/bold cyan]",
            border_style="cyan",
            padding=(1, 2),
        )
        self.console.print(panel)

    def create_progress_display(self) -> "AnalysisProgress":
        """Create a progress bar fed by decision progress snapshots."""
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            TextColumn("•"),
            TimeElapsedColumn(),
            TextColumn("{task.fields[branch]}", style="dim"),
            console=self.console,
            expand=False,
            transient=False,
        )
        return AnalysisProgress(progress, self.console)

    def insights(self, insights: list[str]) -> None:
        """Display key insights as a numbered list in a panel."""
        lines = "\n".join(f"{i}. {insight}" for i, insight in enumerate(insights, 1))
        self.console.print(
            Panel(
                lines or "[dim]No insights generated[/dim]",
                title="[bold green]Key Decision Insights[/bold green]",
                border_style="green",
                padding=(1, 2),
            )
        )

    def decision_tree(self, root: DecisionNode) -> None:
        """Render the decision tree with risk/opportunity annotations."""
        tree = Tree(_node_label(root))
        stack = [(root, tree)]
        while stack:
            node, branch = stack.pop()
            for child in node.children:
                child_branch = branch.add(_node_label(child))
                stack.append((child, child_branch))
        self.console.print(tree)


def _node_label(node: DecisionNode) -> str:
    parts = [f"[bold]{node.description}[/bold] [dim]({node.type})[/dim]"]
    if node.risk is not None:
        parts.append(f"[red]risk {node.risk}[/red]")
    if node.opportunity is not None:
        parts.append(f"[green]opportunity {node.opportunity}[/green]")
    if node.probability is not None:
        parts.append(f"[cyan]{node.probability:g}%[/cyan]")
    return " ".join(parts)


class AnalysisProgress:
    """Live progress bar for one decision analysis."""

    def __init__(self, progress: Progress, console: Console):
        self.progress = progress
        self.console = console
        self._task_id: Optional[TaskID] = None
        self._live: Optional[Live] = None

    def __enter__(self) -> "AnalysisProgress":
        self._task_id = self.progress.add_task(
            "Analyzing decision tree", total=None, branch=""
        )
        self._live = Live(self.progress, console=self.console, refresh_per_second=10)
        self._live.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._live:
            self._live.stop()

    def update(self, snapshot: DecisionProgress) -> None:
        """Apply a progress snapshot (usable directly as on_progress)."""
        if self._task_id is None:
            return

        branch = snapshot.current_branch or ""
        if len(branch) > MAX_BRANCH_DISPLAY:
            branch = "…" + branch[-(MAX_BRANCH_DISPLAY - 1) :]

        self.progress.update(
            self._task_id,
            total=max(snapshot.total_branches, snapshot.completed_branches),
            completed=snapshot.completed_branches,
            description=(
                f"Analyzing ({snapshot.percent_complete}%) "
                f"depth {snapshot.current_depth}/{snapshot.total_depth}"
            ),
            branch=branch,
        )

    def finish(self) -> None:
        """Fill the bar once the walk has ended, whatever the estimate was."""
        if self._task_id is None:
            return
        task = self.progress.tasks[self._task_id]
        self.progress.update(self._task_id, total=task.completed)
