"""Application services."""

from .decision_service import DecisionService, estimate_total_branches
from .result_store import ResultStore

__all__ = ["DecisionService", "ResultStore", "estimate_total_branches"]
