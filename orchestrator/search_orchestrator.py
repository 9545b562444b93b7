"""
PaginatedSearchOrchestrator - drives one search request to a terminal outcome.

SHA-1 lookups are a single backend call. Keyword, coordinate and class-name
searches page through the backend until an empty page, the page cap, or
cancellation. Any backend error ends the run with a failed outcome; partial
results are never returned.
"""

import threading
import time
from typing import Callable

from backends.base_backend import SearchBackend
from models.artifact import Artifact, SearchPage
from models.search_outcome import RunState, SearchOutcome
from models.search_request import SearchMode, SearchRequest
from orchestrator.cancellation import CancellationToken
from orchestrator.progress import (
    EXECUTING_PERCENT,
    PREPARING_PERCENT,
    PROCESSING_PERCENT,
    ProgressReporter,
    ProgressSink,
    page_progress,
)
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_PAGES = 50

PageFetcher = Callable[[SearchBackend, SearchRequest, int], SearchPage | None]

# Single source of truth for mode -> backend operation.
MODE_DISPATCH: dict[SearchMode, PageFetcher] = {
    SearchMode.KEYWORD: lambda backend, req, page: backend.search_by_keyword(req.keyword, page),
    SearchMode.SHA1: lambda backend, req, page: backend.search_by_sha1(req.sha1, page),
    SearchMode.COORDINATES: lambda backend, req, page: backend.search_by_coordinates(
        req.group_id, req.artifact_id, req.version, page
    ),
    SearchMode.CLASS_NAME: lambda backend, req, page: backend.search_by_class_name(
        req.class_name, req.fully_qualified, page
    ),
}


class _RunCancelled(Exception):
    """Internal signal: cancellation observed at a checkpoint."""


class PaginatedSearchOrchestrator:
    """
    Executes exactly one search run.

    A fresh instance is created per search invocation; calling ``run`` a
    second time raises RuntimeError. Arbitration between concurrent runs
    belongs to the caller (see SearchSession).

    Example usage:
        orchestrator = PaginatedSearchOrchestrator(max_pages=10)
        outcome = orchestrator.run(SearchRequest.for_keyword("guava"), backend)
        if outcome.is_completed:
            for artifact in outcome.artifacts:
                print(artifact.coordinates)
    """

    def __init__(self, max_pages: int = DEFAULT_MAX_PAGES):
        """
        Args:
            max_pages: Maximum number of pages fetched by a paginated run
        """
        if max_pages < 1:
            raise ValueError(f"max_pages must be at least 1, got {max_pages}")
        self.max_pages = max_pages
        self._state = RunState.IDLE
        self._state_lock = threading.Lock()
        self._backend_calls = 0
        self._pages_fetched = 0

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def backend_calls(self) -> int:
        return self._backend_calls

    def run(
        self,
        request: SearchRequest,
        backend: SearchBackend,
        progress_sink: ProgressSink | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> SearchOutcome:
        """
        Run ``request`` against ``backend`` and return its terminal outcome.

        Args:
            request: The search to execute
            backend: Backend serving the query operations
            progress_sink: Optional callable receiving ProgressEvents
            cancel_token: Optional token checked before and after each backend call

        Returns:
            SearchOutcome (completed, cancelled or failed); never raises for
            backend errors or cancellation

        Raises:
            RuntimeError: If this orchestrator has already been started
            ValueError: If the request's mode has no backend operation
        """
        fetch = MODE_DISPATCH.get(request.mode)
        if fetch is None:
            raise ValueError(f"No backend operation for search mode {request.mode!r}")

        with self._state_lock:
            if self._state is not RunState.IDLE:
                raise RuntimeError("PaginatedSearchOrchestrator instances run only once")
            self._state = RunState.RUNNING

        token = cancel_token or CancellationToken()
        reporter = ProgressReporter(progress_sink, request_id=request.request_id)
        start = time.monotonic()

        logger.info(
            f"Starting {request.mode.value} search on {backend.name}: {request.describe()}",
            extra={
                "extra_fields": {
                    "request_id": request.request_id,
                    "mode": request.mode.value,
                    "backend": backend.name,
                    "max_pages": self.max_pages,
                }
            },
        )

        try:
            try:
                reporter.report(PREPARING_PERCENT, "Preparing request")
                self._checkpoint(token)
                if request.mode.is_paginated:
                    artifacts = self._run_paginated(request, backend, fetch, reporter, token)
                else:
                    artifacts = self._run_single(request, backend, fetch, reporter, token)
            except _RunCancelled:
                outcome = SearchOutcome.cancelled(**self._metadata(request, start))
            except Exception as e:
                if token.is_cancelled:
                    # A call aborted by cancellation is not a failure
                    logger.debug(f"Discarding error raised after cancellation: {type(e).__name__}: {e}")
                    outcome = SearchOutcome.cancelled(**self._metadata(request, start))
                else:
                    outcome = SearchOutcome.failed(e, **self._metadata(request, start))
            else:
                outcome = SearchOutcome.completed(artifacts, **self._metadata(request, start))
        finally:
            reporter.finish("Search finished")

        self._state = outcome.run_state
        self._log_outcome(request, backend, outcome)
        return outcome

    def _run_single(
        self,
        request: SearchRequest,
        backend: SearchBackend,
        fetch: PageFetcher,
        reporter: ProgressReporter,
        token: CancellationToken,
    ) -> tuple[Artifact, ...]:
        reporter.report(EXECUTING_PERCENT, "Executing SHA-1 query")
        page = self._fetch(backend, request, fetch, 0, token)
        reporter.report(PROCESSING_PERCENT, "Processing results")
        return page.artifacts

    def _run_paginated(
        self,
        request: SearchRequest,
        backend: SearchBackend,
        fetch: PageFetcher,
        reporter: ProgressReporter,
        token: CancellationToken,
    ) -> tuple[Artifact, ...]:
        accumulated: list[Artifact] = []
        for page_index in range(self.max_pages):
            reporter.report(page_progress(page_index, self.max_pages), f"Loading page {page_index + 1}")
            page = self._fetch(backend, request, fetch, page_index, token)
            if page.is_empty:
                break
            accumulated.extend(page.artifacts)
        else:
            logger.info(
                f"Page cap of {self.max_pages} reached",
                extra={"extra_fields": {"request_id": request.request_id}},
            )

        reporter.report(PROCESSING_PERCENT, "Processing results")
        return tuple(accumulated)

    def _fetch(
        self,
        backend: SearchBackend,
        request: SearchRequest,
        fetch: PageFetcher,
        page_index: int,
        token: CancellationToken,
    ) -> SearchPage:
        self._checkpoint(token)
        self._backend_calls += 1
        page = fetch(backend, request, page_index)
        # Results of a call that returned after cancellation are discarded.
        self._checkpoint(token)
        if page is None:
            page = SearchPage(page=page_index)
        self._pages_fetched += 1
        logger.debug(
            f"Fetched page {page_index} ({len(page)} artifacts)",
            extra={"extra_fields": {"request_id": request.request_id, "page": page_index}},
        )
        return page

    @staticmethod
    def _checkpoint(token: CancellationToken) -> None:
        if token.is_cancelled:
            raise _RunCancelled()

    def _metadata(self, request: SearchRequest, start: float) -> dict:
        return {
            "request_id": request.request_id,
            "pages_fetched": self._pages_fetched,
            "backend_calls": self._backend_calls,
            "latency_ms": int((time.monotonic() - start) * 1000),
        }

    def _log_outcome(self, request: SearchRequest, backend: SearchBackend, outcome: SearchOutcome) -> None:
        extra = {
            "extra_fields": {
                "request_id": request.request_id,
                "backend": backend.name,
                "status": outcome.status.value,
                "artifact_count": len(outcome.artifacts),
                "backend_calls": outcome.backend_calls,
                "latency_ms": outcome.latency_ms,
            }
        }
        if outcome.is_failed:
            logger.error(f"Search failed: {outcome.error_summary()}", extra=extra)
        elif outcome.is_cancelled:
            logger.info("Search cancelled", extra=extra)
        else:
            logger.info(f"Search complete: {len(outcome.artifacts)} artifacts", extra=extra)
