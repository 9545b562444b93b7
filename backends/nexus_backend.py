"""Nexus Repository 3 search client (``service/rest/v1/search``)."""

import threading
from collections import OrderedDict
from datetime import datetime
from typing import Any

import httpx

from config.repository_config import RepositoryConfig
from models.artifact import Artifact, SearchPage
from utils.logger import get_logger

from .base_backend import SearchBackend
from .errors import BackendError, UnsupportedSearchError

logger = get_logger(__name__)

SEARCH_PATH = "/service/rest/v1/search"
DEFAULT_TIMEOUT_S = 15.0
MAX_CACHED_QUERIES = 128
CHECKSUM_EXTENSIONS = {"sha1", "sha256", "sha512", "md5", "asc"}


class NexusBackend(SearchBackend):
    """
    Search backend for a Nexus Repository 3 instance.

    Nexus pages with opaque continuation tokens; the orchestrator pages with
    indices. Tokens are remembered per query so page ``n`` is reached from
    the nearest known page below it. A response without a continuation token
    marks the last page: every later index is an empty page.
    """

    def __init__(
        self,
        config: RepositoryConfig,
        repository: str | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        proxy_url: str | None = None,
        transport: httpx.BaseTransport | None = None,
        name: str = "nexus",
    ):
        self.name = name
        self.config = config
        self.repository = repository
        auth = (config.username, config.password) if config.has_credentials else None
        self.client = httpx.Client(
            base_url=config.url,
            auth=auth,
            timeout=timeout_s,
            proxy=proxy_url,
            transport=transport,
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )
        # query key -> {page index: continuation token that fetches it}
        self._tokens: OrderedDict[tuple, dict[int, str | None]] = OrderedDict()
        # query key -> index of the last page
        self._last_page: dict[tuple, int] = {}
        self._lock = threading.Lock()

    def search_by_keyword(self, keyword: str, page: int) -> SearchPage:
        return self._search({"q": keyword}, page)

    def search_by_sha1(self, sha1: str, page: int) -> SearchPage:
        return self._search({"sha1": sha1.lower()}, page)

    def search_by_coordinates(
        self,
        group_id: str | None,
        artifact_id: str | None,
        version: str | None,
        page: int,
    ) -> SearchPage:
        params = {}
        if group_id:
            params["maven.groupId"] = group_id
        if artifact_id:
            params["maven.artifactId"] = artifact_id
        if version:
            params["maven.baseVersion"] = version
        if not params:
            raise BackendError("coordinate search needs at least one coordinate", backend=self.name)
        return self._search(params, page)

    def search_by_class_name(self, class_name: str, fully_qualified: bool, page: int) -> SearchPage:
        raise UnsupportedSearchError("class search is not supported by Nexus", backend=self.name)

    def supports_class_search(self) -> bool:
        return False

    def close(self) -> None:
        self.client.close()

    def _search(self, criteria: dict[str, str], page: int) -> SearchPage:
        params = {"format": "maven2", **criteria}
        if self.repository:
            params["repository"] = self.repository
        key = tuple(sorted(params.items()))

        with self._lock:
            tokens = self._tokens.setdefault(key, {0: None})
            self._tokens.move_to_end(key)
            while len(self._tokens) > MAX_CACHED_QUERIES:
                evicted, _ = self._tokens.popitem(last=False)
                self._last_page.pop(evicted, None)
            last_page = self._last_page.get(key)
            if last_page is not None and page > last_page:
                return SearchPage(page=page)
            current = max(p for p in tokens if p <= page)
            token = tokens[current]

        while True:
            items, next_token = self._fetch(params, token, current)
            with self._lock:
                if next_token:
                    tokens[current + 1] = next_token
                else:
                    self._last_page[key] = current
            if current == page:
                return SearchPage(artifacts=self._to_artifacts(items), page=page)
            if not next_token:
                return SearchPage(page=page)
            current += 1
            token = next_token

    def _fetch(
        self, params: dict[str, str], token: str | None, page: int
    ) -> tuple[list[dict[str, Any]], str | None]:
        request_params = dict(params)
        if token:
            request_params["continuationToken"] = token

        logger.info(
            f"Nexus search (page={page})",
            extra={"extra_fields": {"backend": self.name, "page": page, "criteria": params}},
        )

        try:
            response = self.client.get(SEARCH_PATH, params=request_params)
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

        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            raise BackendError("malformed search response: missing items", backend=self.name)
        return items, payload.get("continuationToken")

    def _to_artifacts(self, items: list[dict[str, Any]]) -> tuple[Artifact, ...]:
        artifacts = []
        for item in items:
            group_id = item.get("group")
            artifact_id = item.get("name")
            version = item.get("version")
            if not group_id or not artifact_id or not version:
                continue
            asset = self._primary_asset(item.get("assets") or [])
            maven2 = asset.get("maven2") or {}
            artifacts.append(
                Artifact(
                    group_id=group_id,
                    artifact_id=artifact_id,
                    version=version,
                    version_date=self._parse_date(asset.get("lastModified")),
                    classifier=maven2.get("classifier"),
                    extension=maven2.get("extension"),
                    repository=item.get("repository"),
                    artifact_link=asset.get("downloadUrl"),
                )
            )
        return tuple(artifacts)

    @staticmethod
    def _primary_asset(assets: list[dict[str, Any]]) -> dict[str, Any]:
        """Main binary of a component: unclassified jar first, then any non-checksum asset."""
        candidates = [
            a for a in assets if (a.get("maven2") or {}).get("extension") not in CHECKSUM_EXTENSIONS
        ]
        for asset in candidates:
            maven2 = asset.get("maven2") or {}
            if maven2.get("extension") == "jar" and not maven2.get("classifier"):
                return asset
        if candidates:
            return candidates[0]
        return assets[0] if assets else {}

    @staticmethod
    def _parse_date(value: str | None):
        if not value:
            return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return None
