from datetime import date, datetime, timedelta

import pytest

from backends.errors import BackendError
from models.artifact import Artifact, SearchPage
from models.search_outcome import OutcomeStatus, RunState, SearchOutcome


def test_only_completed_carries_artifacts():
    artifact = Artifact("g", "a", "1")
    with pytest.raises(ValueError):
        SearchOutcome(status=OutcomeStatus.CANCELLED, artifacts=(artifact,))


def test_failed_requires_error():
    with pytest.raises(ValueError):
        SearchOutcome(status=OutcomeStatus.FAILED)


def test_cancelled_cannot_carry_error():
    with pytest.raises(ValueError):
        SearchOutcome(status=OutcomeStatus.CANCELLED, error=RuntimeError("x"))


def test_completed_normalises_artifacts_to_tuple():
    outcome = SearchOutcome.completed([Artifact("g", "a", "1")])
    assert isinstance(outcome.artifacts, tuple)
    assert outcome.run_state == RunState.COMPLETED


def test_to_dict_reports_error_type_and_message():
    outcome = SearchOutcome.failed(BackendError("boom", backend="central", status_code=503))
    data = outcome.to_dict()
    assert data["status"] == "failed"
    assert data["error"] == {"type": "BackendError", "message": "[central] HTTP 503: boom"}
    assert data["artifacts"] == []


def test_artifact_to_dict_and_coordinates():
    artifact = Artifact("org.example", "lib", "2.0", version_date=date(2024, 5, 1))
    assert artifact.coordinates == "org.example:lib:2.0"
    assert artifact.to_dict()["version_date"] == "2024-05-01"


def test_search_page_accepts_lists():
    page = SearchPage(artifacts=[Artifact("g", "a", "1")], page=2)
    assert isinstance(page.artifacts, tuple)
    assert len(page) == 1
    assert not page.is_empty
    assert SearchPage().is_empty


def test_timestamp_is_utc_aware():
    timestamp = datetime.fromisoformat(SearchOutcome.cancelled().timestamp)
    assert timestamp.utcoffset() == timedelta(0)
