"""Job routes."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from comicgenius_services import JobStatus
from comicgenius_api.deps import get_jobs, verify_token
from comicgenius_api.schemas import (
    ErrorResponse,
    JobStatusResponse,
    PaginatedResponse,
    job_to_status,
    paginate,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get(
    "",
    response_model=PaginatedResponse[JobStatusResponse],
    responses={401: {"model": ErrorResponse}},
)
async def list_jobs(
    token: Annotated[Optional[str], Depends(verify_token)],
    status_filter: Optional[JobStatus] = Query(None, alias="status"),
    job_type: Optional[str] = Query(None, alias="type"),
    session_id: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    """List all jobs."""
    jobs, total = get_jobs().list_jobs(
        status=status_filter,
        job_type=job_type,
        session_id=session_id,
        limit=limit,
        offset=offset,
    )
    return paginate([job_to_status(j) for j in jobs], total, limit, offset)


@router.get(
    "/{job_id}",
    response_model=JobStatusResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_job(
    job_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Get job status."""
    job = get_jobs().get_job(job_id)

    if not job:
        raise HTTPException(status_code=404, detail=f"Job '{job_id}' not found")

    return job_to_status(job)


@router.delete(
    "/{job_id}",
    response_model=JobStatusResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def cancel_job(
    job_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Cancel a running job."""
    job_service = get_jobs()
    job = job_service.get_job(job_id)

    if not job:
        raise HTTPException(status_code=404, detail=f"Job '{job_id}' not found")

    if not job_service.cancel_job(job_id):
        raise HTTPException(
            status_code=409,
            detail=f"Job cannot be cancelled (status: {job.status.value})",
        )

    return job_to_status(job)
