"""Fake search backends shared by the test suite."""

import threading

from backends.base_backend import SearchBackend
from backends.errors import BackendError
from models.artifact import Artifact, SearchPage


def make_artifact(page: int, index: int = 0, group_id: str = "org.example") -> Artifact:
    return Artifact(
        group_id=group_id,
        artifact_id=f"lib-{page}-{index}",
        version="1.0.0",
        extension="jar",
        repository="central",
    )


class FakeBackend(SearchBackend):
    """
    Scripted backend for orchestrator tests.

    ``pages`` maps a page index to the artifacts returned for it; missing
    indices return an empty page. ``errors`` maps a page index to the
    exception raised when that page is requested.
    """

    def __init__(
        self,
        pages: dict[int, list[Artifact]] | None = None,
        errors: dict[int, Exception] | None = None,
        class_search: bool = True,
        name: str = "fake",
        on_call=None,
    ):
        self.name = name
        self.pages = pages or {}
        self.errors = errors or {}
        self.class_search = class_search
        self.on_call = on_call
        self.calls: list[tuple] = []
        self._lock = threading.Lock()

    def _answer(self, call: tuple, page: int) -> SearchPage:
        with self._lock:
            self.calls.append(call)
        if self.on_call is not None:
            self.on_call(call)
        if page in self.errors:
            raise self.errors[page]
        return SearchPage(artifacts=tuple(self.pages.get(page, [])), page=page)

    def search_by_keyword(self, keyword, page):
        return self._answer(("keyword", keyword, page), page)

    def search_by_sha1(self, sha1, page):
        return self._answer(("sha1", sha1, page), page)

    def search_by_coordinates(self, group_id, artifact_id, version, page):
        return self._answer(("coordinates", group_id, artifact_id, version, page), page)

    def search_by_class_name(self, class_name, fully_qualified, page):
        if not self.class_search:
            raise BackendError("class search unsupported", backend=self.name)
        return self._answer(("class_name", class_name, fully_qualified, page), page)

    def supports_class_search(self):
        return self.class_search


class EndlessBackend(FakeBackend):
    """Every page returns ``per_page`` artifacts, forever."""

    def __init__(self, per_page: int = 1, **kwargs):
        super().__init__(**kwargs)
        self.per_page = per_page

    def _answer(self, call, page):
        with self._lock:
            self.calls.append(call)
        if self.on_call is not None:
            self.on_call(call)
        return SearchPage(
            artifacts=tuple(make_artifact(page, i) for i in range(self.per_page)), page=page
        )


class BlockingBackend(FakeBackend):
    """Blocks inside each call until ``release`` is set."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.entered = threading.Event()
        self.release = threading.Event()

    def _answer(self, call, page):
        self.entered.set()
        self.release.wait(timeout=5)
        return super()._answer(call, page)

