"""Wizard navigation routes."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from comicgenius_services import WizardService
from comicgenius_api.deps import ensure_no_comic_job, get_session_manager, verify_token
from comicgenius_api.schemas import ErrorResponse, WizardResponse, wizard_to_response

router = APIRouter(prefix="/sessions/{session_id}/wizard", tags=["Wizard"])

NAV_RESPONSES = {
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


def get_wizard(session_id: str) -> WizardService:
    return WizardService(get_session_manager(session_id))


@router.get("", response_model=WizardResponse, responses=NAV_RESPONSES)
async def get_step(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Get the current step."""
    return wizard_to_response(get_wizard(session_id).current_step)


@router.post("/next", response_model=WizardResponse, responses=NAV_RESPONSES)
async def next_step(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Advance one step. Leaving step 1 needs a story of valid length."""
    return wizard_to_response(get_wizard(session_id).next())


@router.post("/back", response_model=WizardResponse, responses=NAV_RESPONSES)
async def previous_step(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Go back one step."""
    return wizard_to_response(get_wizard(session_id).back())


@router.post("/go/{step}", response_model=WizardResponse, responses=NAV_RESPONSES)
async def go_to_step(
    session_id: str,
    step: int,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Jump back to a step already reached."""
    return wizard_to_response(get_wizard(session_id).go_to(step))


@router.post("/regenerate", response_model=WizardResponse, responses=NAV_RESPONSES)
async def regenerate(
    session_id: str,
    token: Annotated[Optional[str], Depends(verify_token)],
):
    """Drop the generated comic and return to style selection."""
    manager = get_session_manager(session_id)
    ensure_no_comic_job(manager)
    return wizard_to_response(WizardService(manager).regenerate())
