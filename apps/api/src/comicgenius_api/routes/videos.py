"""Panel video routes."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Response, status

from comicgenius_services import ComicService, VideoService, get_job_service, video_filename
from comicgenius_api.deps import get_session_manager, get_settings, verify_token
from comicgenius_api.schemas import ErrorResponse, JobResponse, job_to_response

router = APIRouter(prefix="/sessions/{session_id}/panels/{panel_number}/video", tags=["Videos"])


@router.post(
    "",
    response_model=JobResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def generate_video(
    session_id: str,
    panel_number: int,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Animate a panel.

    Video generation takes minutes; the job message carries the latest
    status line.
    """
    manager = get_session_manager(session_id)
    ComicService(manager).get_panel(panel_number)
    service = VideoService(manager, poll_interval=get_settings().video_poll_interval)

    job_service = get_job_service()
    job = job_service.create_job(
        "video_generation",
        metadata={"session_id": session_id, "panel_number": panel_number},
    )

    def on_progress(message: str) -> None:
        job_service.update_message(job.id, message)

    async def generate():
        video = await service.generate(panel_number, on_progress=on_progress)
        return {"panel_number": video.panel_number, "aspect_ratio": video.aspect_ratio}

    job_service.start_job(job, generate())
    return job_to_response(job)


@router.get(
    "",
    response_class=Response,
    responses={
        200: {"content": {"video/mp4": {}}},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def download_video(
    session_id: str,
    panel_number: int,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Download the panel's video."""
    video = VideoService(get_session_manager(session_id)).get_video(panel_number)
    return Response(
        content=video.data,
        media_type=video.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{video_filename(panel_number)}"'},
    )
