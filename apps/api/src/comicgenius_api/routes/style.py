"""Style routes."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from comicgenius_core_schemas import ComicStyle
from comicgenius_services import StyleService, style_options
from comicgenius_api.deps import get_session_manager, verify_token
from comicgenius_api.schemas import ErrorResponse, StyleOptionsResponse, UpdateStyleRequest

router = APIRouter(tags=["Style"])


@router.get("/styles", response_model=StyleOptionsResponse)
async def list_style_options():
    """Selectable values for each style axis."""
    return StyleOptionsResponse(**style_options())


@router.get(
    "/sessions/{session_id}/style",
    response_model=ComicStyle,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_style(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Get the session's style."""
    return StyleService(get_session_manager(session_id)).get_style()


@router.put(
    "/sessions/{session_id}/style",
    response_model=ComicStyle,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_style(
    session_id: str,
    request: UpdateStyleRequest,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Change style, palette and/or border."""
    service = StyleService(get_session_manager(session_id))
    return service.update_style(
        style=request.style,
        palette=request.palette,
        border=request.border,
    )
