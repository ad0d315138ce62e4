"""API routes."""

from .sessions import router as sessions_router
from .story import router as story_router
from .wizard import router as wizard_router
from .characters import router as characters_router
from .style import router as style_router
from .comic import router as comic_router
from .videos import router as videos_router
from .exports import router as exports_router
from .jobs import router as jobs_router
from .webhook import router as webhook_router

__all__ = [
    "sessions_router",
    "story_router",
    "wizard_router",
    "characters_router",
    "style_router",
    "comic_router",
    "videos_router",
    "exports_router",
    "jobs_router",
    "webhook_router",
]
