"""
Run Cancellation

Cancellation token scoped to a whole runbook run. The engine checks it
before each step; an in-flight step is never interrupted by it.
"""

import threading
import time
from typing import Optional


class RunCancelledError(Exception):
    """Run was cancelled by the caller."""


class DeadlineExceededError(RunCancelledError):
    """Run deadline passed before the run finished."""


class CancellationToken:
    """
    Thread-safe cancellation flag with an optional deadline.

    Example:
        token = CancellationToken(timeout=120)

        # from another thread
        token.cancel("operator aborted")

        if token.cancelled:
            raise token.cause
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Seconds from now after which the token counts as expired
        """
        self._cause: Optional[RunCancelledError] = None
        self._lock = threading.Lock()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self, reason: str = "run cancelled") -> None:
        """Cancel the token. Only the first cause is kept."""
        with self._lock:
            if self._cause is None:
                self._cause = RunCancelledError(reason)

    @property
    def cancelled(self) -> bool:
        """True once cancelled or past the deadline."""
        return self.cause is not None

    @property
    def cause(self) -> Optional[RunCancelledError]:
        """Why the token is done, or None while still live."""
        with self._lock:
            if self._cause is None and self._deadline is not None:
                if time.monotonic() >= self._deadline:
                    self._cause = DeadlineExceededError("run deadline exceeded")
            return self._cause

