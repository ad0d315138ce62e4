"""Panel animation service."""

from typing import Callable, Optional

from comicgenius_generators.video import VideoGenerator
from comicgenius_gemini_client import GeminiClient
from comicgenius_core_schemas import (
    VIDEO_POLL_INTERVAL,
    GeneratedVideo,
    NotFoundError,
    ValidationError,
)
from comicgenius_storage import SessionManager


def video_filename(panel_number: int) -> str:
    return f"comic-panel-{panel_number}.mp4"


class VideoService:
    """Animates session panels and keeps the resulting clips."""

    def __init__(
        self,
        manager: SessionManager,
        client: Optional[GeminiClient] = None,
        poll_interval: float = VIDEO_POLL_INTERVAL,
    ):
        """Initialize service with a session manager."""
        self.manager = manager
        self.client = client
        self.poll_interval = poll_interval

    def get_video(self, panel_number: int) -> GeneratedVideo:
        """Get the video generated for a panel.

        Raises:
            NotFoundError: If the panel has not been animated
        """
        video = self.manager.session.videos.get(panel_number)
        if not video:
            raise NotFoundError("Video", str(panel_number))
        return video

    async def generate(
        self,
        panel_number: int,
        on_progress: Optional[Callable[[str], None]] = None,
    ) -> GeneratedVideo:
        """Animate one panel.

        Raises:
            NotFoundError: If the panel does not exist
            ValidationError: If the panel has no generated image
            GenerationError: If video generation fails
        """
        panel = self.manager.session.get_panel(panel_number)
        if not panel:
            raise NotFoundError("Panel", str(panel_number))
        if not panel.has_image_data:
            raise ValidationError(
                f"Panel {panel_number} has no generated image to animate",
                field="panel_number",
            )

        generator = VideoGenerator(self.client, poll_interval=self.poll_interval)
        video = await generator.generate_video(
            panel_image=panel.generated_image,
            narration=panel.narration,
            characters=panel.characters,
            panel_number=panel_number,
            on_progress=on_progress,
        )

        self.manager.session.videos[panel_number] = video
        self.manager.save()
        return video
