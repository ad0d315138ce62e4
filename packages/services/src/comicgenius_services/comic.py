"""Comic generation service."""

import logging
from typing import Callable, Optional

from comicgenius_generators.comic import ComicGenerator
from comicgenius_gemini_client import GeminiClient
from comicgenius_core_schemas import (
    PANEL_REQUEST_DELAY,
    ComicPanel,
    GenerationError,
    GenerationProgress,
    NotFoundError,
    ValidationError,
    WizardError,
    WizardStep,
)
from comicgenius_storage import SessionManager

logger = logging.getLogger(__name__)

OnProgress = Callable[[int, int], None]


class ComicService:
    """Runs the panel pipeline for a session."""

    def __init__(
        self,
        manager: SessionManager,
        client: Optional[GeminiClient] = None,
        panel_delay: float = PANEL_REQUEST_DELAY,
    ):
        """Initialize service with a session manager.

        Args:
            manager: Session to generate for
            client: Gemini client (global client if None)
            panel_delay: Seconds between panel image requests
        """
        self.manager = manager
        self.client = client
        self.panel_delay = panel_delay

    def validate(self) -> None:
        """Check the session is ready for generation.

        Raises:
            ValidationError: If the story is blank or no characters are tagged
        """
        session = self.manager.session
        if not session.story.strip():
            raise ValidationError("Write a story before generating a comic", field="story")
        if not session.characters:
            raise ValidationError("Add at least one character before generating a comic", field="characters")

    def ensure_idle(self) -> None:
        """Refuse to start while this session is already generating.

        Raises:
            WizardError: If a generation is in progress
        """
        session = self.manager.session
        if session.generating:
            raise WizardError(
                "A comic is already being generated for this session",
                current_step=session.current_step,
            )

    def list_panels(self) -> list[ComicPanel]:
        return self.manager.session.panels

    def get_panel(self, panel_number: int) -> ComicPanel:
        """Get a generated panel.

        Raises:
            NotFoundError: If there is no such panel
        """
        panel = self.manager.session.get_panel(panel_number)
        if not panel:
            raise NotFoundError("Panel", str(panel_number))
        return panel

    async def generate(self, on_progress: Optional[OnProgress] = None) -> list[ComicPanel]:
        """Generate all panels and move the wizard to the preview step.

        Args:
            on_progress: Called with (done, total) after each panel

        Returns:
            The generated panels

        Raises:
            ValidationError: If the session is not ready
            WizardError: If a comic is already being generated
            GenerationError: If generation fails unexpectedly
        """
        self.validate()
        self.ensure_idle()
        session = self.manager.session
        session.progress = GenerationProgress()
        session.generating = True
        self.manager.save()

        def track(current: int, total: int) -> None:
            session.progress = GenerationProgress(current=current, total=total)
            if on_progress:
                on_progress(current, total)

        generator = ComicGenerator(self.client)
        try:
            panels = await generator.generate_panels(
                story=session.story,
                characters=session.characters,
                style=session.style,
                on_progress=track,
                delay=self.panel_delay,
            )
        except Exception as e:
            logger.exception("Error generating comic")
            raise GenerationError("Failed to generate comic. Please try again.") from e
        finally:
            session.generating = False
            self.manager.save()

        session.panels = panels
        session.videos = {}
        session.current_step = WizardStep.GENERATE_COMIC
        self.manager.save()

        logger.info("Generated %d panel(s) for session %s", len(panels), session.id)
        return panels
