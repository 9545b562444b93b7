"""Tests for NexusBackend continuation-token paging against a mocked transport."""

import httpx
import pytest

from backends.errors import BackendError, UnsupportedSearchError
from backends.nexus_backend import NexusBackend
from config.repository_config import RepositoryConfig


def component(name, version="1.0", classifier=None, extension="jar"):
    return {
        "repository": "maven-releases",
        "group": "org.example",
        "name": name,
        "version": version,
        "assets": [
            {
                "downloadUrl": f"https://nexus.example.org/{name}-{version}.{extension}.sha1",
                "lastModified": "2024-02-03T10:00:00.000+00:00",
                "maven2": {"extension": "sha1"},
            },
            {
                "downloadUrl": f"https://nexus.example.org/{name}-{version}.{extension}",
                "lastModified": "2024-02-03T10:00:00.000+00:00",
                "maven2": {"extension": extension, "classifier": classifier},
            },
        ],
    }


class NexusPages:
    """Serves ``pages`` in order, chaining them with continuation tokens."""

    def __init__(self, pages):
        self.pages = pages
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        token = request.url.params.get("continuationToken")
        index = int(token.removeprefix("t")) if token else 0
        next_token = f"t{index + 1}" if index + 1 < len(self.pages) else None
        return httpx.Response(
            200, json={"items": self.pages[index], "continuationToken": next_token}
        )


def make_backend(handler, config=None, repository=None):
    config = config or RepositoryConfig.create("https://nexus.example.org/")
    return NexusBackend(config, repository=repository, transport=httpx.MockTransport(handler))


def test_first_page_sends_format_and_criteria():
    server = NexusPages([[component("lib")]])
    backend = make_backend(server, repository="maven-releases")

    page = backend.search_by_keyword("lib", 0)

    request = server.requests[0]
    assert request.url.path == "/service/rest/v1/search"
    assert request.url.params["q"] == "lib"
    assert request.url.params["format"] == "maven2"
    assert request.url.params["repository"] == "maven-releases"
    assert "continuationToken" not in request.url.params
    assert len(page) == 1


def test_sequential_pages_reuse_tokens():
    server = NexusPages([[component("a")], [component("b")], [component("c")]])
    backend = make_backend(server)

    names = [backend.search_by_keyword("x", p).artifacts[0].artifact_id for p in range(3)]

    assert names == ["a", "b", "c"]
    assert len(server.requests) == 3
    assert server.requests[2].url.params["continuationToken"] == "t2"


def test_page_after_last_is_empty_without_a_call():
    server = NexusPages([[component("a")]])
    backend = make_backend(server)

    backend.search_by_keyword("x", 0)
    page = backend.search_by_keyword("x", 1)

    assert page.is_empty
    assert len(server.requests) == 1


def test_jumping_ahead_walks_the_chain():
    server = NexusPages([[component("a")], [component("b")], [component("c")]])
    backend = make_backend(server)

    page = backend.search_by_keyword("x", 2)

    assert page.artifacts[0].artifact_id == "c"
    assert len(server.requests) == 3


def test_jumping_past_the_end_is_empty():
    server = NexusPages([[component("a")], [component("b")]])
    backend = make_backend(server)
    assert backend.search_by_keyword("x", 5).is_empty


def test_primary_asset_skips_checksums():
    server = NexusPages([[component("lib", classifier="sources")]])
    backend = make_backend(server)

    artifact = backend.search_by_keyword("lib", 0).artifacts[0]

    assert artifact.classifier == "sources"
    assert artifact.extension == "jar"
    assert artifact.repository == "maven-releases"
    assert artifact.artifact_link == "https://nexus.example.org/lib-1.0.jar"
    assert artifact.version_date.isoformat() == "2024-02-03"


def test_coordinate_criteria():
    server = NexusPages([[]])
    backend = make_backend(server)
    backend.search_by_coordinates("org.example", None, "1.0", 0)

    params = server.requests[0].url.params
    assert params["maven.groupId"] == "org.example"
    assert params["maven.baseVersion"] == "1.0"
    assert "maven.artifactId" not in params


def test_sha1_criteria():
    server = NexusPages([[]])
    backend = make_backend(server)
    backend.search_by_sha1("ABC", 0)
    assert server.requests[0].url.params["sha1"] == "abc"


def test_class_search_unsupported():
    backend = make_backend(NexusPages([[]]))
    assert not backend.supports_class_search()
    with pytest.raises(UnsupportedSearchError):
        backend.search_by_class_name("Foo", False, 0)


def test_basic_auth_sent_when_credentials_configured():
    server = NexusPages([[]])
    config = RepositoryConfig.create("https://nexus.example.org", "deployer", "secret")
    backend = make_backend(server, config=config)

    backend.search_by_keyword("x", 0)

    assert server.requests[0].headers["Authorization"].startswith("Basic ")


def test_unauthorized_maps_to_backend_error():
    backend = make_backend(lambda r: httpx.Response(401))
    with pytest.raises(BackendError) as exc_info:
        backend.search_by_keyword("x", 0)
    assert exc_info.value.status_code == 401
    assert not exc_info.value.retryable


def test_missing_items_is_malformed():
    backend = make_backend(lambda r: httpx.Response(200, json={}))
    with pytest.raises(BackendError, match="malformed"):
        backend.search_by_keyword("x", 0)
