"""
Outcome and progress contracts of a paginated search run.

A run emits zero or more ProgressEvent objects and finishes with exactly one
SearchOutcome: completed (with artifacts), cancelled, or failed (with the
original error).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from models.artifact import Artifact


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.COMPLETED, RunState.CANCELLED, RunState.FAILED)


class OutcomeStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class ProgressEvent:
    percent: int
    note: str = ""

    def __post_init__(self):
        if not 0 <= self.percent <= 100:
            raise ValueError(f"percent must be within 0-100, got {self.percent}")

    @property
    def is_terminal(self) -> bool:
        return self.percent == 100


@dataclass(frozen=True)
class SearchOutcome:
    status: OutcomeStatus
    artifacts: tuple[Artifact, ...] = ()
    error: BaseException | None = None

    request_id: str | None = None
    pages_fetched: int = 0
    backend_calls: int = 0
    latency_ms: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def __post_init__(self):
        if not isinstance(self.artifacts, tuple):
            object.__setattr__(self, "artifacts", tuple(self.artifacts))
        if self.status is not OutcomeStatus.COMPLETED and self.artifacts:
            raise ValueError(f"{self.status.value} outcome cannot carry artifacts")
        if self.status is OutcomeStatus.FAILED and self.error is None:
            raise ValueError("failed outcome requires an error")
        if self.status is not OutcomeStatus.FAILED and self.error is not None:
            raise ValueError(f"{self.status.value} outcome cannot carry an error")

    @classmethod
    def completed(cls, artifacts, **metadata) -> "SearchOutcome":
        return cls(status=OutcomeStatus.COMPLETED, artifacts=tuple(artifacts), **metadata)

    @classmethod
    def cancelled(cls, **metadata) -> "SearchOutcome":
        return cls(status=OutcomeStatus.CANCELLED, **metadata)

    @classmethod
    def failed(cls, error: BaseException, **metadata) -> "SearchOutcome":
        return cls(status=OutcomeStatus.FAILED, error=error, **metadata)

    @property
    def is_completed(self) -> bool:
        return self.status is OutcomeStatus.COMPLETED

    @property
    def is_cancelled(self) -> bool:
        return self.status is OutcomeStatus.CANCELLED

    @property
    def is_failed(self) -> bool:
        return self.status is OutcomeStatus.FAILED

    @property
    def run_state(self) -> RunState:
        return RunState(self.status.value)

    def error_summary(self) -> str | None:
        """'<ErrorType>: <message>' for failed outcomes, None otherwise."""
        if self.error is None:
            return None
        return f"{type(self.error).__name__}: {self.error}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "request_id": self.request_id,
            "artifact_count": len(self.artifacts),
            "artifacts": [a.to_dict() for a in self.artifacts],
            "error": (
                {"type": type(self.error).__name__, "message": str(self.error)}
                if self.error
                else None
            ),
            "pages_fetched": self.pages_fetched,
            "backend_calls": self.backend_calls,
            "latency_ms": self.latency_ms,
            "timestamp": self.timestamp,
        }
