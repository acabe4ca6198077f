"""
Execution context: a deadline plus a cancellation signal.

A context is handed down a call chain so that whoever owns it can bound
or abort the work done underneath. Child contexts inherit their parent's
deadline and cancellation.
"""

import threading
import time
from typing import Optional

from kubexec.errors import DeadlineExceeded, ExecCancelled, KubexecError


class ExecContext:
    """Deadline and cancellation scope for remote executions."""

    def __init__(self, deadline: Optional[float] = None, parent: Optional["ExecContext"] = None):
        """
        Initialize context.

        Args:
            deadline: Absolute time.monotonic() value, or None for no deadline
            parent: Enclosing context whose deadline and cancellation also apply
        """
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline
        self._parent = parent
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "ExecContext":
        """Context with no deadline that is only cancelled explicitly."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float, parent: Optional["ExecContext"] = None) -> "ExecContext":
        """Context that expires ``seconds`` from now."""
        return cls(deadline=time.monotonic() + seconds, parent=parent)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        """Cancel this context and every child derived from it."""
        self._cancelled.set()

    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self._parent is not None and self._parent.cancelled()

    def error(self) -> Optional[KubexecError]:
        """Return why the context is done, or None while it is still live."""
        if self.cancelled():
            return ExecCancelled()
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceeded()
        return None

    def done(self) -> bool:
        return self.error() is not None

    def raise_if_done(self) -> None:
        err = self.error()
        if err is not None:
            raise err

    def __enter__(self) -> "ExecContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()
