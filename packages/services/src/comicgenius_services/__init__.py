"""ComicGenius Services - Shared business logic for CLI and API.

Services:
- SessionService: Session lifecycle
- StoryService: Story text and character extraction
- CharacterService: Character tagging, photos and AI portraits
- StyleService: Comic style selection
- WizardService: Step navigation
- ComicService: Panel generation
- VideoService: Panel animation
- ExportService: PDF export
- JobService: Background job management
"""

from .session import SessionService
from .story import StoryService
from .character import CharacterService
from .style import StyleService, style_options
from .wizard import WizardService
from .comic import ComicService
from .video import VideoService, video_filename
from .export import ExportService
from .job import Job, JobService, JobStatus, get_job_service

__all__ = [
    "SessionService",
    "StoryService",
    "CharacterService",
    "StyleService",
    "style_options",
    "WizardService",
    "ComicService",
    "VideoService",
    "video_filename",
    "ExportService",
    "JobService",
    "Job",
    "JobStatus",
    "get_job_service",
]
