"""Comic generation routes."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, status

from comicgenius_core_schemas import ComicPanel
from comicgenius_services import ComicService, get_job_service
from comicgenius_api.deps import (
    COMIC_JOB,
    ensure_no_comic_job,
    get_session_manager,
    get_settings,
    verify_token,
)
from comicgenius_api.schemas import ErrorResponse, JobResponse, job_to_response

router = APIRouter(prefix="/sessions/{session_id}/comic", tags=["Comic"])


@router.get(
    "",
    response_model=list[ComicPanel],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def list_panels(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Get the generated panels."""
    return ComicService(get_session_manager(session_id)).list_panels()


@router.post(
    "",
    response_model=JobResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def generate_comic(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Generate the comic.

    The story is broken into panels, then each panel is drawn in turn. This
    is an async operation; the job's progress counts finished panels. Only
    one generation per session runs at a time.
    """
    manager = get_session_manager(session_id)
    service = ComicService(manager, panel_delay=get_settings().panel_delay)
    service.validate()
    service.ensure_idle()
    ensure_no_comic_job(manager)

    job_service = get_job_service()
    job = job_service.create_job(COMIC_JOB, metadata={"session_id": session_id})

    def on_progress(current: int, total: int) -> None:
        job_service.update_progress(job.id, current, total)

    async def generate():
        panels = await service.generate(on_progress=on_progress)
        return {"panel_count": len(panels)}

    job_service.start_job(job, generate())
    return job_to_response(job)
