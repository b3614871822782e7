"""Cooperative cancellation for long-running tree analysis."""

from deepdecision.core.exceptions import AnalysisCancelledError


class CancellationToken:
    """Flag shared across a walk and checked before every generation call.

    Once cancelled, pending work raises AnalysisCancelledError at its next
    check and children that have not started are never expanded.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        if not self._cancelled:
            self._cancelled = True
            self._reason = reason

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            message = "Decision analysis cancelled"
            if self._reason:
                message = f"{message}: {self._reason}"
            raise AnalysisCancelledError(message)
