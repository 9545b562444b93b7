"""Dependency snippet endpoint."""

from fastapi import APIRouter, Depends

from server.dependencies import get_api_key
from server.schemas.requests import ArtifactRequest
from server.schemas.responses import SnippetsResponseDTO
from utils.dependency_snippets import build_all_snippets

router = APIRouter(prefix="/v1", tags=["Snippets"])


@router.post("/snippets", response_model=SnippetsResponseDTO)
async def dependency_snippets(
    body: ArtifactRequest,
    api_key: str = Depends(get_api_key),
):
    """Dependency declarations of one artifact for every supported build tool."""
    artifact = body.to_artifact()
    return SnippetsResponseDTO(coordinates=artifact.coordinates, snippets=build_all_snippets(artifact))
