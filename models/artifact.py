"""
Artifact records returned by repository search backends.

Artifacts are immutable; a page of them is the unit a backend hands back
per call, and the orchestrator only ever appends them to its own accumulation.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass(frozen=True)
class Artifact:
    group_id: str
    artifact_id: str
    version: str
    version_date: date | None = None
    classifier: str | None = None
    extension: str | None = None
    repository: str | None = None
    artifact_link: str | None = None

    @property
    def coordinates(self) -> str:
        """group:artifact:version string."""
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "group_id": self.group_id,
            "artifact_id": self.artifact_id,
            "version": self.version,
            "version_date": self.version_date.isoformat() if self.version_date else None,
            "classifier": self.classifier,
            "extension": self.extension,
            "repository": self.repository,
            "artifact_link": self.artifact_link,
        }


@dataclass(frozen=True)
class SearchPage:
    """
    One page of backend results.

    An empty ``artifacts`` tuple is the backend's "no more results" signal,
    never an error.
    """

    artifacts: tuple[Artifact, ...] = field(default_factory=tuple)
    page: int = 0

    def __post_init__(self):
        if not isinstance(self.artifacts, tuple):
            object.__setattr__(self, "artifacts", tuple(self.artifacts or ()))

    @property
    def is_empty(self) -> bool:
        return not self.artifacts

    def __len__(self) -> int:
        return len(self.artifacts)
