"""Panel animation generator."""

import logging
from typing import Callable, Optional

from comicgenius_gemini_client import GeminiClient, decode_data_url, detect_aspect_ratio
from comicgenius_core_schemas import (
    VIDEO_POLL_INTERVAL,
    GeneratedVideo,
    GenerationError,
    PanelCharacter,
)
from comicgenius_generators.templates import render
from comicgenius_generators.templates.video import VIDEO_PROMPT

logger = logging.getLogger(__name__)

OnVideoStatus = Callable[[str], None]


def build_voiceover_script(narration: str, characters: list[PanelCharacter]) -> str:
    """Join narration and the non-empty dialogue lines into a voiceover script."""
    dialogue = "\n".join(
        f'{pc.name}: "{pc.dialogue}"' for pc in characters if pc.dialogue
    )
    return f"{narration}\n\n{dialogue}"


class VideoGenerator:
    """Animates a finished panel into a short clip."""

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        poll_interval: float = VIDEO_POLL_INTERVAL,
    ):
        """Initialize the video generator.

        Args:
            client: Gemini client (uses global client if not provided)
            poll_interval: Seconds between job status checks
        """
        if client is None:
            from comicgenius_gemini_client import get_client

            client = get_client()
        self.client = client
        self.poll_interval = poll_interval

    async def generate_video(
        self,
        panel_image: str,
        narration: str,
        characters: list[PanelCharacter],
        panel_number: int = 0,
        on_progress: Optional[OnVideoStatus] = None,
    ) -> GeneratedVideo:
        """Animate a panel image.

        Args:
            panel_image: Panel image as a data URL
            narration: Panel narration
            characters: Panel dialogue lines
            panel_number: Panel this video belongs to
            on_progress: Called with human-readable status messages

        Returns:
            The downloaded video

        Raises:
            GenerationError: On any failure, wrapping the cause
        """
        def report(message: str) -> None:
            if on_progress:
                on_progress(message)

        try:
            report("Preparing video generation...")

            image_data, mime_type = decode_data_url(panel_image)
            aspect_ratio = detect_aspect_ratio(image_data)
            report(f"Detected aspect ratio: {aspect_ratio}")

            prompt = render(
                VIDEO_PROMPT,
                script=build_voiceover_script(narration, characters),
            )

            report("Generating video with VEO...")
            video_data, uri = await self.client.generate_video(
                prompt=prompt,
                image_data=image_data,
                mime_type=mime_type,
                aspect_ratio=aspect_ratio,
                poll_interval=self.poll_interval,
                on_status=report,
            )
        except Exception as e:
            logger.exception("Error generating video for panel %s", panel_number)
            raise GenerationError(
                f"Failed to generate video: {e}",
                details={"panel_number": panel_number},
            ) from e

        report("Video generated successfully!")
        return GeneratedVideo(
            panel_number=panel_number,
            data=video_data,
            aspect_ratio=aspect_ratio,
            uri=uri,
        )
