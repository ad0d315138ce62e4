"""Session routes."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from comicgenius_api.deps import get_session_service, verify_token
from comicgenius_api.schemas import (
    ErrorResponse,
    PaginatedResponse,
    SessionResponse,
    SessionSummary,
    paginate,
    session_to_response,
    session_to_summary,
)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.get(
    "",
    response_model=PaginatedResponse[SessionSummary],
    responses={401: {"model": ErrorResponse}},
)
async def list_sessions(
    token: Annotated[Optional[str], Depends(verify_token)],
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    """List sessions, newest first."""
    sessions, total = get_session_service().list_sessions(limit=limit, offset=offset)
    return paginate([session_to_summary(s) for s in sessions], total, limit, offset)


@router.post(
    "",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse}},
)
async def create_session(
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Start a new comic at step 1 with an empty story."""
    return session_to_response(get_session_service().create())


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_session(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Get full session state."""
    return session_to_response(get_session_service().get(session_id))


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_session(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Discard a session."""
    if not get_session_service().delete(session_id):
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
