"""
SearchRequest - immutable snapshot of one user-issued repository query.

A request is built once per search invocation and never mutated. Only the
fields relevant to its mode are meaningful; construction rejects requests
that lack the fields their mode needs, so malformed input never reaches the
orchestrator.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class SearchMode(str, Enum):
    KEYWORD = "keyword"
    SHA1 = "sha1"
    COORDINATES = "coordinates"
    CLASS_NAME = "class_name"

    @property
    def is_paginated(self) -> bool:
        return self is not SearchMode.SHA1


def _trim_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = str(value).strip()
    return stripped or None


@dataclass(frozen=True)
class SearchRequest:
    mode: SearchMode
    page: int | None = None
    keyword: str | None = None
    sha1: str | None = None
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    class_name: str | None = None
    fully_qualified: bool = False

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        try:
            mode = SearchMode(self.mode)
        except ValueError:
            raise ValueError(f"Unsupported search mode: {self.mode!r}") from None
        object.__setattr__(self, "mode", mode)

        for name in ("keyword", "sha1", "group_id", "artifact_id", "version", "class_name"):
            object.__setattr__(self, name, _trim_to_none(getattr(self, name)))

        if self.page is not None and (isinstance(self.page, bool) or int(self.page) < 0):
            raise ValueError(f"page must be a non-negative integer, got {self.page!r}")

        if mode is SearchMode.KEYWORD and not self.keyword:
            raise ValueError("keyword search requires a keyword")
        if mode is SearchMode.SHA1 and not self.sha1:
            raise ValueError("sha1 search requires a sha1 checksum")
        if mode is SearchMode.COORDINATES and not (self.group_id or self.artifact_id):
            raise ValueError("coordinate search requires a group id or an artifact id")
        if mode is SearchMode.CLASS_NAME and not self.class_name:
            raise ValueError("class search requires a class name")

    @classmethod
    def for_keyword(cls, keyword: str, page: int | None = None) -> "SearchRequest":
        return cls(mode=SearchMode.KEYWORD, keyword=keyword, page=page)

    @classmethod
    def for_sha1(cls, sha1: str) -> "SearchRequest":
        return cls(mode=SearchMode.SHA1, sha1=sha1)

    @classmethod
    def for_coordinates(
        cls,
        group_id: str | None,
        artifact_id: str | None,
        version: str | None = None,
        page: int | None = None,
    ) -> "SearchRequest":
        return cls(
            mode=SearchMode.COORDINATES,
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            page=page,
        )

    @classmethod
    def for_class_name(
        cls, class_name: str, fully_qualified: bool = False, page: int | None = None
    ) -> "SearchRequest":
        return cls(
            mode=SearchMode.CLASS_NAME,
            class_name=class_name,
            fully_qualified=fully_qualified,
            page=page,
        )

    def describe(self) -> str:
        """Short human-readable summary, used in logs."""
        if self.mode is SearchMode.KEYWORD:
            return f"keyword={self.keyword!r}"
        if self.mode is SearchMode.SHA1:
            return f"sha1={self.sha1!r}"
        if self.mode is SearchMode.COORDINATES:
            return f"gav={self.group_id or '*'}:{self.artifact_id or '*'}:{self.version or '*'}"
        qualifier = " (fully qualified)" if self.fully_qualified else ""
        return f"class={self.class_name!r}{qualifier}"
