"""Liveness endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from server.schemas.responses import HealthResponseDTO

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponseDTO)
async def health_check(request: Request):
    """Report liveness and the running API version."""
    return HealthResponseDTO(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=request.app.version,
    )
