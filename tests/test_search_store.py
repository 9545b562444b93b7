"""Tests for SearchRunStore: per-session arbitration and bounded resources."""

import threading

import pytest

from models.search_request import SearchRequest
from orchestrator.search_session import SearchInProgressError
from server import search_store
from server.search_store import SearchRunStore

from fakes import BlockingBackend, FakeBackend, make_artifact


@pytest.fixture
def store():
    backend = FakeBackend(pages={0: [make_artifact(0)]})
    store = SearchRunStore({"fake": backend}, default_backend="fake")
    yield store
    store.shutdown()


def test_many_client_sessions_share_a_bounded_pool(store):
    threads_before = threading.active_count()

    for i in range(300):
        _, handle = store.start(SearchRequest.for_sha1("abc"), session_id=f"client-{i}")
        assert handle.result(timeout=5).is_completed

    assert threading.active_count() - threads_before <= search_store.MAX_WORKERS
    assert store.session_count <= search_store.MAX_RETAINED_SESSIONS


def test_running_session_is_not_evicted(monkeypatch):
    monkeypatch.setattr(search_store, "MAX_RETAINED_SESSIONS", 2)
    slow = BlockingBackend(pages={0: [make_artifact(0)]}, name="slow")
    fast = FakeBackend(name="fast")
    store = SearchRunStore({"slow": slow, "fast": fast}, default_backend="fast")
    try:
        store.start(SearchRequest.for_keyword("lib"), session_id="busy", backend_name="slow")
        assert slow.entered.wait(timeout=5)
        for i in range(4):
            store.start(SearchRequest.for_sha1("abc"), session_id=f"client-{i}")[1].result(timeout=5)

        # The busy session still rejects a second search
        with pytest.raises(SearchInProgressError):
            store.start(SearchRequest.for_keyword("lib"), session_id="busy", backend_name="slow")
    finally:
        slow.release.set()
        store.shutdown()


def test_unknown_backend_raises_key_error(store):
    with pytest.raises(KeyError):
        store.start(SearchRequest.for_sha1("abc"), backend_name="artifactory")


def test_cancel_unknown_run(store):
    assert store.cancel("missing") is None
