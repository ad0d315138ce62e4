"""Story routes."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from comicgenius_services import StoryService
from comicgenius_api.deps import get_session_manager, verify_token
from comicgenius_api.schemas import ErrorResponse, StoryResponse, UpdateStoryRequest

router = APIRouter(prefix="/sessions/{session_id}/story", tags=["Story"])


@router.get(
    "",
    response_model=StoryResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_story(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Get the story text."""
    story = StoryService(get_session_manager(session_id)).get_story()
    return StoryResponse(story=story, length=len(story))


@router.put(
    "",
    response_model=StoryResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_story(
    session_id: str,
    request: UpdateStoryRequest,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Replace the story text.

    Stories longer than 100 characters have their characters extracted;
    names not already tagged are added with no photos.
    """
    service = StoryService(get_session_manager(session_id))
    added = await service.set_story(request.story, extract=request.extract)
    story = service.get_story()
    return StoryResponse(story=story, length=len(story), added_characters=added)
