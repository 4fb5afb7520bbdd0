"""Cooperative cancellation for in-flight retrievals."""

import threading
import time
from typing import Optional

from graphrag_text2sql.models import RetrievalErrorKind


class Deadline:
    """Time budget plus optional caller-owned cancellation event."""

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.deadline_ts = (
            time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        )
        self.cancel_event = cancel_event

    def remaining(self) -> Optional[float]:
        """Seconds left, or None when there is no time limit."""
        if self.deadline_ts is None:
            return None
        return max(0.0, self.deadline_ts - time.monotonic())

    def stop_reason(self) -> Optional[RetrievalErrorKind]:
        """Why work should stop now, or None to carry on."""
        if self.cancel_event is not None and self.cancel_event.is_set():
            return RetrievalErrorKind.CANCELLED
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            return RetrievalErrorKind.TIMEOUT
        return None


NO_DEADLINE = Deadline()
