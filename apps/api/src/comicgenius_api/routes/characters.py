"""Character routes."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from comicgenius_core_schemas import Character, CharacterPhoto
from comicgenius_services import CharacterService, StoryService, get_job_service
from comicgenius_api.deps import get_session_manager, verify_token
from comicgenius_api.schemas import (
    CreateCharacterRequest,
    ErrorResponse,
    GenerateCharacterImageRequest,
    JobResponse,
    PaginatedResponse,
    UpdateCharacterRequest,
    job_to_response,
    paginate,
)

router = APIRouter(prefix="/sessions/{session_id}/characters", tags=["Characters"])


@router.get(
    "",
    response_model=PaginatedResponse[Character],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def list_characters(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    """List all characters."""
    service = CharacterService(get_session_manager(session_id))
    characters, total = service.list_characters(limit=limit, offset=offset)
    return paginate(characters, total, limit, offset)


@router.post(
    "",
    response_model=Character,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_character(
    session_id: str,
    request: CreateCharacterRequest,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Tag a character by name."""
    service = CharacterService(get_session_manager(session_id))
    return service.create_character(request.name)


@router.post(
    "/extract",
    response_model=list[Character],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def extract_characters(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Extract names from the story and tag any that are new.

    Returns the characters that were added.
    """
    service = StoryService(get_session_manager(session_id))
    return await service.extract_characters()


@router.get(
    "/{character_id}",
    response_model=Character,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_character(
    session_id: str,
    character_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Get character details."""
    service = CharacterService(get_session_manager(session_id))
    return service.get_character(character_id)


@router.patch(
    "/{character_id}",
    response_model=Character,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_character(
    session_id: str,
    character_id: str,
    request: UpdateCharacterRequest,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Rename a character."""
    service = CharacterService(get_session_manager(session_id))
    return service.rename_character(character_id, request.name)


@router.delete(
    "/{character_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_character(
    session_id: str,
    character_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Remove a character and its photos."""
    service = CharacterService(get_session_manager(session_id))

    if not service.delete_character(character_id):
        raise HTTPException(status_code=404, detail=f"Character '{character_id}' not found")


@router.post(
    "/{character_id}/photos",
    response_model=list[CharacterPhoto],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def upload_photos(
    session_id: str,
    character_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
    files: list[UploadFile] = File(...),
):
    """Upload reference photos.

    The first photo of each character is sent to the image model when the
    character appears in a panel.
    """
    service = CharacterService(get_session_manager(session_id))

    uploads = []
    for upload in files:
        uploads.append((await upload.read(), upload.content_type or ""))

    return service.add_photos(character_id, uploads)


@router.delete(
    "/{character_id}/photos/{photo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_photo(
    session_id: str,
    character_id: str,
    photo_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Remove one photo."""
    service = CharacterService(get_session_manager(session_id))

    if not service.remove_photo(character_id, photo_id):
        raise HTTPException(status_code=404, detail=f"Photo '{photo_id}' not found")


@router.post(
    "/{character_id}/image",
    response_model=JobResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def generate_character_image(
    session_id: str,
    character_id: str,
    request: GenerateCharacterImageRequest = GenerateCharacterImageRequest(),
    token: Annotated[Optional[str], Depends(verify_token)] = None,
):
    """Draw an anime-style portrait of the character.

    This is an async operation. The portrait is attached as a photo when
    the job completes.
    """
    service = CharacterService(get_session_manager(session_id))
    char = service.get_character(character_id)

    job_service = get_job_service()
    job = job_service.create_job(
        "character_image_generation",
        metadata={
            "session_id": session_id,
            "character_id": character_id,
            "character_name": char.name,
        },
    )

    async def generate():
        photo = await service.generate_image(character_id, request.description)
        return {"photo_id": photo.id}

    job_service.start_job(job, generate())
    return job_to_response(job)
