"""Persistence of analyzed decision trees and reports."""

from pathlib import Path

from loguru import logger

from deepdecision.core.models import DecisionNode, tree_from_json, tree_to_json

TREE_FILENAME = "decision-tree.json"
REPORT_FILENAME = "decision-report.md"


class ResultStore:
    """Reads and writes the latest tree and report in one directory."""

    def __init__(self, output_dir: Path):
        self._output_dir = Path(output_dir)

    @property
    def tree_path(self) -> Path:
        return self._output_dir / TREE_FILENAME

    @property
    def report_path(self) -> Path:
        return self._output_dir / REPORT_FILENAME

    def save_tree(self, tree: DecisionNode) -> Path:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self.tree_path.write_text(tree_to_json(tree), encoding="utf-8")
        logger.debug(f"Saved decision tree to {self.tree_path}")
        return self.tree_path

    def save_report(self, report: str) -> Path:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self.report_path.write_text(report, encoding="utf-8")
        logger.debug(f"Saved decision report to {self.report_path}")
        return self.report_path

    def load_tree(self) -> DecisionNode | None:
        """Load the saved tree, or None if nothing has been saved."""
        if not self.tree_path.exists():
            return None
        return tree_from_json(self.tree_path.read_text(encoding="utf-8"))

    def load_report(self) -> str | None:
        if not self.report_path.exists():
            return None
        return self.report_path.read_text(encoding="utf-8")
