"""Progress reporting and cancellation shared by the splitters."""
import logging
import threading
from typing import Callable, Optional

from services.errors import JobCancelled

logger = logging.getLogger(__name__)

ProgressSink = Callable[[float], None]


class ProgressTracker:
    """
    Forward progress to a caller-supplied sink, clamped to [0, 100] and never
    decreasing within one job.

    The sink is invoked synchronously on the splitting thread.
    """

    def __init__(self, sink: Optional[ProgressSink] = None):
        self.sink = sink
        self.current = 0.0

    def report(self, percent: float) -> None:
        percent = min(max(percent, 0.0), 100.0)
        if percent < self.current:
            return
        self.current = percent
        if self.sink is not None:
            self.sink(percent)

    def report_fraction(self, done: float, total: float) -> None:
        self.report(100.0 if total <= 0 else (done / total) * 100.0)


def raise_if_cancelled(cancel_event: Optional[threading.Event], **details) -> None:
    """Raise JobCancelled if the caller has set the cancellation token."""
    if cancel_event is not None and cancel_event.is_set():
        logger.info("Split cancelled", extra=details)
        raise JobCancelled("Split was cancelled", **details)
