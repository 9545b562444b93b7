"""Maven Central search client (Solr-style ``solrsearch/select`` endpoint)."""

from datetime import datetime, timezone
from typing import Any

import httpx

from models.artifact import Artifact, SearchPage
from utils.logger import get_logger

from .base_backend import SearchBackend
from .errors import BackendError

logger = get_logger(__name__)

DEFAULT_SEARCH_URL = "https://search.maven.org/solrsearch/select"
DEFAULT_DOWNLOAD_URL = "https://repo1.maven.org/maven2"
DEFAULT_PAGE_SIZE = 20
DEFAULT_TIMEOUT_S = 15.0
USER_AGENT = "artifact-search/1.0"


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class MavenCentralBackend(SearchBackend):
    """
    Search backend for Maven Central.

    Pages map onto Solr offsets (``start = page * page_size``); Solr answers an
    offset past the last hit with an empty ``docs`` list, which is exactly the
    empty-page signal the orchestrator expects.
    """

    def __init__(
        self,
        url: str | None = None,
        download_url: str | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        proxy_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
        name: str = "central",
    ):
        """
        Initialize the Maven Central client.

        Args:
            url: Search endpoint (defaults to search.maven.org)
            download_url: Repository root used to build artifact links
            page_size: Rows requested per page
            timeout_s: Per-request timeout in seconds
            proxy_url: Optional HTTP(S) proxy
            transport: Optional httpx transport (tests inject a MockTransport)
            name: Backend name used in logs and errors
        """
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.name = name
        self.url = url or DEFAULT_SEARCH_URL
        self.download_url = (download_url or DEFAULT_DOWNLOAD_URL).rstrip("/")
        self.page_size = page_size
        self.client = httpx.Client(
            timeout=timeout_s,
            proxy=proxy_url,
            transport=transport,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            follow_redirects=True,
        )

    def search_by_keyword(self, keyword: str, page: int) -> SearchPage:
        return self._query(keyword, page)

    def search_by_sha1(self, sha1: str, page: int) -> SearchPage:
        return self._query(f"1:{_quote(sha1.lower())}", page)

    def search_by_coordinates(
        self,
        group_id: str | None,
        artifact_id: str | None,
        version: str | None,
        page: int,
    ) -> SearchPage:
        clauses = []
        if group_id:
            clauses.append(f"g:{_quote(group_id)}")
        if artifact_id:
            clauses.append(f"a:{_quote(artifact_id)}")
        if version:
            clauses.append(f"v:{_quote(version)}")
        if not clauses:
            raise BackendError("coordinate search needs at least one coordinate", backend=self.name)
        return self._query(" AND ".join(clauses), page, core="gav")

    def search_by_class_name(self, class_name: str, fully_qualified: bool, page: int) -> SearchPage:
        field_name = "fc" if fully_qualified else "c"
        return self._query(f"{field_name}:{_quote(class_name)}", page, core="gav")

    def supports_class_search(self) -> bool:
        return True

    def close(self) -> None:
        self.client.close()

    def _query(self, q: str, page: int, core: str | None = None) -> SearchPage:
        params: dict[str, Any] = {
            "q": q,
            "rows": self.page_size,
            "start": page * self.page_size,
            "wt": "json",
        }
        if core:
            params["core"] = core

        logger.info(
            f"Maven Central query: '{q}' (page={page})",
            extra={"extra_fields": {"backend": self.name, "page": page, "core": core}},
        )

        try:
            response = self.client.get(self.url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            raise BackendError(
                f"search request failed: {e.response.reason_phrase}",
                backend=self.name,
                status_code=status_code,
                retryable=status_code == 429 or status_code >= 500,
            ) from e
        except httpx.HTTPError as e:
            raise BackendError(f"search request failed: {e}", backend=self.name, retryable=True) from e
        except ValueError as e:
            raise BackendError(f"invalid JSON in search response: {e}", backend=self.name) from e

        docs = (payload.get("response") or {}).get("docs") if isinstance(payload, dict) else None
        if not isinstance(docs, list):
            raise BackendError("malformed search response: missing response.docs", backend=self.name)

        artifacts = []
        for doc in docs:
            artifact = self._to_artifact(doc)
            if artifact is not None:
                artifacts.append(artifact)

        logger.debug(f"Maven Central returned {len(artifacts)} artifacts for page {page}")
        return SearchPage(artifacts=tuple(artifacts), page=page)

    def _to_artifact(self, doc: dict[str, Any]) -> Artifact | None:
        group_id = doc.get("g")
        artifact_id = doc.get("a")
        version = doc.get("v") or doc.get("latestVersion")
        if not group_id or not artifact_id or not version:
            logger.debug(f"Skipping incomplete search document: {doc.get('id')}")
            return None

        version_date = None
        timestamp = doc.get("timestamp")
        if isinstance(timestamp, (int, float)) and timestamp > 0:
            version_date = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).date()

        return Artifact(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            version_date=version_date,
            classifier=None,
            extension=doc.get("p"),
            repository=doc.get("repositoryId") or "central",
            artifact_link=f"{self.download_url}/{group_id.replace('.', '/')}/{artifact_id}/{version}/",
        )
