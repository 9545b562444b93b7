"""
Coarse progress reporting for search runs.

Percentages are UI feedback, not completion estimates: a fixed base offset
plus a linear share of a reserved band for paginated runs, and fixed phase
markers for single-call runs. Only monotonicity and the single terminal 100
are guaranteed.
"""

from typing import Callable

from models.search_outcome import ProgressEvent
from utils.logger import get_logger

logger = get_logger(__name__)

ProgressSink = Callable[[ProgressEvent], None]

PREPARING_PERCENT = 5
EXECUTING_PERCENT = 25
PAGINATION_BASE_PERCENT = 10
PAGINATION_BAND_PERCENT = 80
PROCESSING_PERCENT = 90
MAX_INTERMEDIATE_PERCENT = 99
TERMINAL_PERCENT = 100


def page_progress(pages_done: int, max_pages: int) -> int:
    """
    Percentage to report before fetching a page.

    Args:
        pages_done: Pages already fetched in this run
        max_pages: Page cap of the run

    Returns:
        Value in [10, 90], reaching ~90 only near the cap
    """
    if max_pages <= 0:
        return PAGINATION_BASE_PERCENT
    pages_done = max(0, min(pages_done, max_pages))
    return PAGINATION_BASE_PERCENT + (PAGINATION_BAND_PERCENT * pages_done) // max_pages


class ProgressReporter:
    """
    Delivers ProgressEvents to a sink with the run-level guarantees.

    - intermediate values are clamped to 1..99
    - a value lower than the last emitted one is raised to it
    - the terminal 100 is emitted exactly once; later reports are dropped
    - a failing sink is logged and otherwise ignored
    """

    def __init__(self, sink: ProgressSink | None = None, request_id: str | None = None):
        self._sink = sink
        self._request_id = request_id
        self._last_percent = 0
        self._finished = False
        self.last_event: ProgressEvent | None = None

    @property
    def finished(self) -> bool:
        return self._finished

    def report(self, percent: int, note: str) -> None:
        if self._finished:
            return
        percent = max(1, min(int(percent), MAX_INTERMEDIATE_PERCENT))
        percent = max(percent, self._last_percent)
        self._emit(ProgressEvent(percent=percent, note=note))

    def finish(self, note: str) -> None:
        if self._finished:
            return
        self._finished = True
        self._emit(ProgressEvent(percent=TERMINAL_PERCENT, note=note))

    def _emit(self, event: ProgressEvent) -> None:
        self._last_percent = event.percent
        self.last_event = event
        if self._sink is None:
            return
        try:
            self._sink(event)
        except Exception as e:
            logger.warning(
                f"Progress sink raised: {e}",
                extra={
                    "extra_fields": {
                        "request_id": self._request_id,
                        "percent": event.percent,
                        "error_type": type(e).__name__,
                    }
                },
            )
