"""API request/response schemas."""

from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from comicgenius_core_schemas import (
    BorderStyle,
    Character,
    ColorPalette,
    ComicPanel,
    ComicSession,
    ComicStyle,
    ComicStyleName,
    GenerationProgress,
    WizardStep,
)
from comicgenius_services import Job

T = TypeVar("T")


# Pagination
class PaginationMeta(BaseModel):
    """Pagination metadata."""

    total: int
    limit: int
    offset: int
    has_more: bool


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated response wrapper."""

    data: list[T]
    pagination: PaginationMeta


def paginate(data: list, total: int, limit: int, offset: int) -> dict:
    return {
        "data": data,
        "pagination": PaginationMeta(
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + limit < total,
        ),
    }


# Error responses
class ErrorDetail(BaseModel):
    """Error detail."""

    code: str
    message: str
    field: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error response."""

    error: ErrorDetail


# Job responses
class JobResponse(BaseModel):
    """Job response for async operations."""

    job_id: str
    type: str
    status: str
    created_at: datetime
    metadata: dict = Field(default_factory=dict)


class JobStatusResponse(BaseModel):
    """Job status response."""

    id: str
    type: str
    status: str
    progress: int = 0
    total: int = 0
    message: Optional[str] = None
    result: Optional[Any] = None
    error: Optional[str] = None
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    metadata: dict = Field(default_factory=dict)


def job_to_response(job: Job) -> JobResponse:
    return JobResponse(
        job_id=job.id,
        type=job.type,
        status=job.status.value,
        created_at=job.created_at,
        metadata=job.metadata,
    )


def job_to_status(job: Job) -> JobStatusResponse:
    return JobStatusResponse(
        id=job.id,
        type=job.type,
        status=job.status.value,
        progress=job.progress,
        total=job.total,
        message=job.message,
        result=job.result,
        error=job.error,
        created_at=job.created_at,
        started_at=job.started_at,
        completed_at=job.completed_at,
        metadata=job.metadata,
    )


# Session responses
class WizardResponse(BaseModel):
    """Wizard position."""

    current_step: int
    label: str


class SessionResponse(BaseModel):
    """Session state."""

    id: str
    created_at: datetime
    updated_at: datetime
    story: str
    characters: list[Character]
    style: ComicStyle
    wizard: WizardResponse
    progress: GenerationProgress
    generating: bool = False
    panels: list[ComicPanel]
    videos: list[int] = Field(default_factory=list, description="Panel numbers with a video")


class SessionSummary(BaseModel):
    """Session list entry."""

    id: str
    created_at: datetime
    updated_at: datetime
    story_length: int
    character_count: int
    panel_count: int
    current_step: int


def wizard_to_response(step: WizardStep) -> WizardResponse:
    return WizardResponse(current_step=step.value, label=step.label)


def session_to_response(session: ComicSession) -> SessionResponse:
    return SessionResponse(
        id=session.id,
        created_at=session.created_at,
        updated_at=session.updated_at,
        story=session.story,
        characters=session.characters,
        style=session.style,
        wizard=wizard_to_response(session.current_step),
        progress=session.progress,
        generating=session.generating,
        panels=session.panels,
        videos=sorted(session.videos),
    )


def session_to_summary(session: ComicSession) -> SessionSummary:
    return SessionSummary(
        id=session.id,
        created_at=session.created_at,
        updated_at=session.updated_at,
        story_length=len(session.story),
        character_count=len(session.characters),
        panel_count=len(session.panels),
        current_step=session.current_step.value,
    )


# Story requests/responses
class UpdateStoryRequest(BaseModel):
    """Replace story request."""

    story: str
    extract: bool = Field(True, description="Extract characters from the story")


class StoryResponse(BaseModel):
    """Story response."""

    story: str
    length: int
    added_characters: list[Character] = Field(default_factory=list)


# Character requests
class CreateCharacterRequest(BaseModel):
    """Create character request."""

    name: str = Field(..., min_length=1, max_length=100)


class UpdateCharacterRequest(BaseModel):
    """Rename character request."""

    name: str = Field(..., min_length=1, max_length=100)


class GenerateCharacterImageRequest(BaseModel):
    """AI character portrait request."""

    description: Optional[str] = Field(None, max_length=500)


# Style requests/responses
class UpdateStyleRequest(BaseModel):
    """Update style request; omitted axes are left unchanged."""

    style: Optional[ComicStyleName] = None
    palette: Optional[ColorPalette] = None
    border: Optional[BorderStyle] = None


class StyleOptionsResponse(BaseModel):
    """Selectable style values."""

    style: list[str]
    palette: list[str]
    border: list[str]
