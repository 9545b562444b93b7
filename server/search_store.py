"""Thread-safe in-memory store of search sessions and runs for the HTTP layer."""

import concurrent.futures
import threading
from collections import OrderedDict
from collections.abc import Mapping

from backends.base_backend import SearchBackend
from backends.registry import BackendRegistry
from models.search_request import SearchRequest
from orchestrator.search_orchestrator import DEFAULT_MAX_PAGES
from orchestrator.search_session import SearchHandle, SearchSession
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SESSION_ID = "default"
MAX_RETAINED_RUNS = 256
MAX_RETAINED_SESSIONS = 256
MAX_WORKERS = 8


class SearchRunStore:
    """
    Maps HTTP sessions onto SearchSessions and run ids onto SearchHandles.

    Each session_id gets its own SearchSession, so one client cannot start a
    second search while its first is still running, while different clients
    search independently. All sessions share one bounded worker pool; idle
    sessions beyond MAX_RETAINED_SESSIONS are dropped, oldest first.
    """

    def __init__(
        self,
        backends: Mapping[str, SearchBackend],
        default_backend: str,
        max_pages: int = DEFAULT_MAX_PAGES,
        max_workers: int = MAX_WORKERS,
    ):
        if default_backend not in backends:
            raise ValueError(f"Default backend {default_backend!r} is not available")
        self._backends = dict(backends)
        self._default_backend = default_backend
        self.max_pages = max_pages
        self._lock = threading.Lock()
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="search"
        )
        self._sessions: OrderedDict[str, SearchSession] = OrderedDict()
        self._runs: OrderedDict[str, tuple[str, SearchHandle]] = OrderedDict()

    @classmethod
    def from_registry(cls, registry: BackendRegistry, max_pages: int = DEFAULT_MAX_PAGES) -> "SearchRunStore":
        backends = {spec.name: registry.create_backend(spec.name) for spec in registry.list_configured()}
        return cls(backends, registry.default_backend, max_pages=max_pages)

    @property
    def default_backend(self) -> str:
        return self._default_backend

    def backend(self, name: str | None = None) -> SearchBackend:
        name = name or self._default_backend
        backend = self._backends.get(name)
        if backend is None:
            raise KeyError(name)
        return backend

    def list_backends(self) -> list[SearchBackend]:
        return list(self._backends.values())

    def start(
        self,
        request: SearchRequest,
        session_id: str | None = None,
        backend_name: str | None = None,
    ) -> tuple[str, SearchHandle]:
        """
        Start a search for ``session_id``.

        Raises:
            KeyError: Unknown backend
            SearchInProgressError: The session already has a running search
        """
        session_id = session_id or DEFAULT_SESSION_ID
        backend = self.backend(backend_name)
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = SearchSession(
                    backend, max_pages=self.max_pages, executor=self._executor, session_id=session_id
                )
                self._sessions[session_id] = session
            self._sessions.move_to_end(session_id)
            handle = session.start(request, backend=backend)
            self._runs[handle.run_id] = (session_id, handle)
            while len(self._runs) > MAX_RETAINED_RUNS:
                self._runs.popitem(last=False)
            self._evict_idle_sessions()
        return session_id, handle

    @property
    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _evict_idle_sessions(self) -> None:
        # Caller holds self._lock
        excess = len(self._sessions) - MAX_RETAINED_SESSIONS
        if excess <= 0:
            return
        for session_id in [sid for sid, s in self._sessions.items() if not s.is_running][:excess]:
            self._sessions.pop(session_id).close(wait=False)

    def get(self, run_id: str) -> tuple[str, SearchHandle] | None:
        with self._lock:
            return self._runs.get(run_id)

    def cancel(self, run_id: str) -> SearchHandle | None:
        entry = self.get(run_id)
        if entry is None:
            return None
        _, handle = entry
        handle.cancel()
        return handle

    def shutdown(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close(wait=False)
        self._executor.shutdown(wait=False)
        for backend in self._backends.values():
            backend.close()
        logger.info("Search store shut down", extra={"extra_fields": {"sessions": len(sessions)}})
