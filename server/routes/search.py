"""Search endpoints - start, poll and cancel background repository searches."""

from fastapi import APIRouter, Depends, HTTPException, status

from models.search_request import SearchMode
from orchestrator.search_session import SearchInProgressError
from server.dependencies import get_api_key, get_search_store
from server.schemas.requests import SearchRequestBody
from server.schemas.responses import BackendDTO, SearchRunDTO
from server.search_store import SearchRunStore
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Search"])


@router.get("/backends", response_model=list[BackendDTO])
async def list_backends(
    store: SearchRunStore = Depends(get_search_store),
    api_key: str = Depends(get_api_key),
):
    """List configured search backends and their capabilities."""
    return [BackendDTO.from_backend(b, store.default_backend) for b in store.list_backends()]


@router.post("/searches", response_model=SearchRunDTO, status_code=status.HTTP_202_ACCEPTED)
async def start_search(
    body: SearchRequestBody,
    store: SearchRunStore = Depends(get_search_store),
    api_key: str = Depends(get_api_key),
):
    """Start a search in the background; poll GET /v1/searches/{run_id} for progress."""
    try:
        request = body.to_search_request()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        backend = store.backend(body.backend)
    except KeyError:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown backend: {body.backend}",
        )

    if request.mode is SearchMode.CLASS_NAME and not backend.supports_class_search():
        raise HTTPException(
            status_code=422,
            detail="Class search is not supported by this backend",
        )

    try:
        session_id, handle = store.start(request, session_id=body.session_id, backend_name=backend.name)
    except SearchInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    logger.info(
        "Search accepted",
        extra={
            "extra_fields": {
                "run_id": handle.run_id,
                "session_id": session_id,
                "backend": backend.name,
                "mode": request.mode.value,
            }
        },
    )
    return SearchRunDTO.from_handle(session_id, handle)


@router.get("/searches/{run_id}", response_model=SearchRunDTO)
async def get_search(
    run_id: str,
    store: SearchRunStore = Depends(get_search_store),
    api_key: str = Depends(get_api_key),
):
    """Current state, latest progress and, once finished, the outcome of a search."""
    entry = store.get(run_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Search not found")
    session_id, handle = entry
    return SearchRunDTO.from_handle(session_id, handle)


@router.post(
    "/searches/{run_id}/cancel",
    response_model=SearchRunDTO,
    status_code=status.HTTP_202_ACCEPTED,
)
async def cancel_search(
    run_id: str,
    store: SearchRunStore = Depends(get_search_store),
    api_key: str = Depends(get_api_key),
):
    """Request cancellation; the run stops at its next checkpoint."""
    entry = store.get(run_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Search not found")
    session_id, handle = entry
    handle.cancel()
    return SearchRunDTO.from_handle(session_id, handle)
