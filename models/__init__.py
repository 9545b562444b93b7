"""
Models package for search requests, artifacts and run outcomes.
"""

from .artifact import Artifact, SearchPage
from .search_outcome import OutcomeStatus, ProgressEvent, RunState, SearchOutcome
from .search_request import SearchMode, SearchRequest

__all__ = [
    "Artifact",
    "OutcomeStatus",
    "ProgressEvent",
    "RunState",
    "SearchMode",
    "SearchOutcome",
    "SearchPage",
    "SearchRequest",
]
