"""Pydantic request models for FastAPI endpoints."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from models.artifact import Artifact
from models.search_request import SearchRequest


class SearchRequestBody(BaseModel):
    mode: str = Field(..., pattern="^(keyword|sha1|coordinates|class_name)$")
    keyword: Optional[str] = None
    sha1: Optional[str] = Field(None, max_length=64)
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None
    class_name: Optional[str] = None
    fully_qualified: bool = False
    page: Optional[int] = Field(None, ge=0)
    backend: Optional[str] = None
    session_id: Optional[str] = Field(None, min_length=1, max_length=128)

    def to_search_request(self) -> SearchRequest:
        """Build the core request; raises ValueError for missing mode fields."""
        return SearchRequest(
            mode=self.mode,
            page=self.page,
            keyword=self.keyword,
            sha1=self.sha1,
            group_id=self.group_id,
            artifact_id=self.artifact_id,
            version=self.version,
            class_name=self.class_name,
            fully_qualified=self.fully_qualified,
        )


class ArtifactRequest(BaseModel):
    group_id: str = Field(..., min_length=1)
    artifact_id: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)
    version_date: Optional[date] = None
    classifier: Optional[str] = None
    extension: Optional[str] = None
    repository: Optional[str] = None
    artifact_link: Optional[str] = None

    def to_artifact(self) -> Artifact:
        return Artifact(**self.model_dump())
