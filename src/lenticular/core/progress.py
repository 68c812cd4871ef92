"""Progress reporting and cooperative cancellation for long-running calls."""

from __future__ import annotations

from typing import Callable

from lenticular.core.exceptions import OperationCancelledError

ProgressCallback = Callable[[float], None]
CancelCheck = Callable[[], bool]


class ProgressTracker:
    """Forward progress fractions to a callback, never moving backwards.

    A tracker can be scoped to a sub-range of a parent operation, so that a
    multi-stage pipeline reports one continuous 0..1 progression.

    Args:
        callback: Receives fractions in [0, 1]. May be None.
        cancel_check: Polled by ``check_cancelled``. May be None.
        operation: Name used in cancellation errors.
        start: Parent fraction at which this tracker begins.
        span: Parent fraction covered by this tracker.
    """

    def __init__(
        self,
        callback: ProgressCallback | None = None,
        cancel_check: CancelCheck | None = None,
        operation: str = "operation",
        start: float = 0.0,
        span: float = 1.0,
    ) -> None:
        self._callback = callback
        self._cancel_check = cancel_check
        self._operation = operation
        self._start = start
        self._span = span
        self._last = 0.0

    @property
    def fraction(self) -> float:
        """Last local fraction reported (0..1)."""
        return self._last

    def update(self, fraction: float) -> None:
        """Report local progress; values are clamped and kept monotonic."""
        fraction = min(1.0, max(self._last, fraction))
        self._last = fraction
        if self._callback is not None:
            self._callback(self._start + self._span * fraction)

    def finish(self) -> None:
        self.update(1.0)

    def is_cancelled(self) -> bool:
        return self._cancel_check is not None and bool(self._cancel_check())

    def check_cancelled(self) -> None:
        """Raise ``OperationCancelledError`` if the caller asked to stop."""
        if self.is_cancelled():
            raise OperationCancelledError(self._operation, self._last)

    def child(self, start: float, span: float, operation: str | None = None) -> ProgressTracker:
        """Tracker covering ``[start, start + span]`` of this tracker's range."""
        return ProgressTracker(
            callback=self._callback,
            cancel_check=self._cancel_check,
            operation=operation or self._operation,
            start=self._start + self._span * start,
            span=self._span * span,
        )
