"""Pydantic response models (DTOs) for FastAPI endpoints."""

from pydantic import BaseModel, Field

from backends.base_backend import SearchBackend
from models.artifact import Artifact
from models.search_outcome import SearchOutcome
from orchestrator.search_session import SearchHandle


class ArtifactDTO(BaseModel):
    group_id: str
    artifact_id: str
    version: str
    version_date: str | None = None
    classifier: str | None = None
    extension: str | None = None
    repository: str | None = None
    artifact_link: str | None = None

    @classmethod
    def from_artifact(cls, artifact: Artifact):
        return cls(**artifact.to_dict())


class ErrorDTO(BaseModel):
    type: str
    message: str


class ProgressDTO(BaseModel):
    percent: int
    note: str


class OutcomeDTO(BaseModel):
    status: str
    artifacts: list[ArtifactDTO] = Field(default_factory=list)
    error: ErrorDTO | None = None
    pages_fetched: int
    backend_calls: int
    latency_ms: int
    timestamp: str

    @classmethod
    def from_outcome(cls, outcome: SearchOutcome):
        """Convert SearchOutcome to DTO."""
        return cls(
            status=outcome.status.value,
            artifacts=[ArtifactDTO.from_artifact(a) for a in outcome.artifacts],
            error=(
                ErrorDTO(type=type(outcome.error).__name__, message=str(outcome.error))
                if outcome.error
                else None
            ),
            pages_fetched=outcome.pages_fetched,
            backend_calls=outcome.backend_calls,
            latency_ms=outcome.latency_ms,
            timestamp=outcome.timestamp,
        )


class SearchRunDTO(BaseModel):
    run_id: str
    session_id: str
    request_id: str
    backend: str
    mode: str
    query: str
    state: str
    progress: ProgressDTO | None = None
    outcome: OutcomeDTO | None = None

    @classmethod
    def from_handle(cls, session_id: str, handle: SearchHandle):
        """Snapshot of a run; ``outcome`` is set once the run is terminal."""
        latest = handle.latest_progress
        outcome = handle.outcome()
        return cls(
            run_id=handle.run_id,
            session_id=session_id,
            request_id=handle.request.request_id,
            backend=handle.backend_name,
            mode=handle.request.mode.value,
            query=handle.request.describe(),
            state=outcome.run_state.value if outcome else handle.state.value,
            progress=ProgressDTO(percent=latest.percent, note=latest.note) if latest else None,
            outcome=OutcomeDTO.from_outcome(outcome) if outcome else None,
        )


class BackendDTO(BaseModel):
    name: str
    supports_class_search: bool
    default: bool = False

    @classmethod
    def from_backend(cls, backend: SearchBackend, default_name: str):
        return cls(
            name=backend.name,
            supports_class_search=backend.supports_class_search(),
            default=backend.name == default_name,
        )


class SnippetsResponseDTO(BaseModel):
    coordinates: str
    snippets: dict[str, str]


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str
