"""
SearchSession - runs searches on a background worker and arbitrates between them.

A session stands for one search surface (a panel, a console, an HTTP client
session). It allows at most one running search at a time; starting another
while one is running is rejected until the caller cancels it. Each run gets a
fresh PaginatedSearchOrchestrator, its own CancellationToken and its own
progress channel, so runs never share accumulated results.
"""

import concurrent.futures
import queue
import threading
import uuid
from typing import Callable

from backends.base_backend import SearchBackend
from models.search_outcome import ProgressEvent, RunState, SearchOutcome
from models.search_request import SearchRequest
from orchestrator.cancellation import CancellationToken
from orchestrator.search_orchestrator import DEFAULT_MAX_PAGES, PaginatedSearchOrchestrator
from utils.logger import get_logger

logger = get_logger(__name__)

CompletionCallback = Callable[[SearchOutcome], None]


class SearchInProgressError(RuntimeError):
    """A search is already running in this session."""


class SearchHandle:
    """
    Caller-side view of one background search run.

    Progress events are delivered through a queue the caller drains at its
    own pace; the terminal outcome is available through ``result``.
    """

    def __init__(
        self, request: SearchRequest, orchestrator: PaginatedSearchOrchestrator, backend_name: str = ""
    ):
        self.run_id = str(uuid.uuid4())
        self.request = request
        self.backend_name = backend_name
        self.token = CancellationToken()
        self._orchestrator = orchestrator
        self._events: queue.Queue[ProgressEvent] = queue.Queue()
        self._latest: ProgressEvent | None = None
        self._latest_lock = threading.Lock()
        self.future: concurrent.futures.Future | None = None

    @property
    def state(self) -> RunState:
        return self._orchestrator.state

    @property
    def latest_progress(self) -> ProgressEvent | None:
        with self._latest_lock:
            return self._latest

    def cancel(self) -> None:
        """Request cooperative cancellation of this run."""
        self.token.cancel()

    def done(self) -> bool:
        return self.future is not None and self.future.done()

    def result(self, timeout: float | None = None) -> SearchOutcome:
        """Block until the run finishes and return its outcome."""
        if self.future is None:
            raise RuntimeError("Search has not been started")
        return self.future.result(timeout=timeout)

    def outcome(self) -> SearchOutcome | None:
        """Terminal outcome if the run has finished, None otherwise."""
        if not self.done():
            return None
        return self.future.result()

    def drain_progress(self) -> list[ProgressEvent]:
        """Return every progress event received since the last drain."""
        events: list[ProgressEvent] = []
        while True:
            try:
                events.append(self._events.get_nowait())
            except queue.Empty:
                return events

    def _publish(self, event: ProgressEvent) -> None:
        with self._latest_lock:
            self._latest = event
        self._events.put(event)


class SearchSession:
    """
    Single-run-at-a-time search executor for one caller.

    Example usage:
        session = SearchSession(backend)
        handle = session.start(SearchRequest.for_keyword("commons-lang3"))
        outcome = handle.result(timeout=30)
        session.close()
    """

    def __init__(
        self,
        backend: SearchBackend,
        max_pages: int = DEFAULT_MAX_PAGES,
        executor: concurrent.futures.Executor | None = None,
        session_id: str | None = None,
    ):
        self.backend = backend
        self.max_pages = max_pages
        self.session_id = session_id or str(uuid.uuid4())
        self._owns_executor = executor is None
        self._executor = executor or concurrent.futures.ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="search"
        )
        self._lock = threading.Lock()
        self._current: SearchHandle | None = None

    @property
    def current(self) -> SearchHandle | None:
        return self._current

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._current is not None and not self._current.done()

    def start(
        self,
        request: SearchRequest,
        on_progress: Callable[[ProgressEvent], None] | None = None,
        on_complete: CompletionCallback | None = None,
        backend: SearchBackend | None = None,
    ) -> SearchHandle:
        """
        Start ``request`` in the background.

        Args:
            request: The search to run
            on_progress: Optional callback invoked on the worker thread per event
            on_complete: Optional callback invoked on the worker thread with the outcome
            backend: Backend for this run only (defaults to the session backend)

        Returns:
            SearchHandle for the new run

        Raises:
            SearchInProgressError: If a previous run is still running and was
                not cancelled
        """
        with self._lock:
            previous = self._current
            # A cancelled run may still be draining its last backend call; the
            # next run queues behind it on the single worker.
            if previous is not None and not previous.done() and not previous.token.is_cancelled:
                raise SearchInProgressError(
                    f"Session {self.session_id} is already running search {previous.run_id}"
                )

            run_backend = backend or self.backend
            handle = SearchHandle(
                request, PaginatedSearchOrchestrator(max_pages=self.max_pages), run_backend.name
            )

            def sink(event: ProgressEvent) -> None:
                handle._publish(event)
                if on_progress is not None:
                    on_progress(event)

            def work() -> SearchOutcome:
                outcome = handle._orchestrator.run(
                    request, run_backend, progress_sink=sink, cancel_token=handle.token
                )
                handle.token.disarm()
                if on_complete is not None:
                    try:
                        on_complete(outcome)
                    except Exception as e:
                        logger.error(
                            f"Completion callback raised: {e}",
                            exc_info=True,
                            extra={"extra_fields": {"run_id": handle.run_id}},
                        )
                return outcome

            handle.future = self._executor.submit(work)
            self._current = handle

        logger.info(
            f"Search {handle.run_id} submitted",
            extra={
                "extra_fields": {
                    "session_id": self.session_id,
                    "run_id": handle.run_id,
                    "request_id": request.request_id,
                    "mode": request.mode.value,
                }
            },
        )
        return handle

    def cancel(self) -> bool:
        """
        Request cancellation of the current run.

        Returns:
            True if a running search was signalled, False if nothing was running
        """
        with self._lock:
            handle = self._current
            if handle is None or handle.done():
                return False
        handle.cancel()
        return True

    def close(self, wait: bool = True) -> None:
        """Cancel any running search and release the worker."""
        self.cancel()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
