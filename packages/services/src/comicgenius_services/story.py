"""Story text service."""

import logging
from typing import Optional

from comicgenius_generators.character import CharacterGenerator
from comicgenius_gemini_client import GeminiClient
from comicgenius_core_schemas import (
    STORY_MAX_LENGTH,
    STORY_MIN_LENGTH,
    Character,
    ValidationError,
)
from comicgenius_storage import SessionManager

logger = logging.getLogger(__name__)


class StoryService:
    """Service for updating the story and extracting its characters."""

    def __init__(self, manager: SessionManager, client: Optional[GeminiClient] = None):
        """Initialize service with a session manager."""
        self.manager = manager
        self.client = client

    def get_story(self) -> str:
        return self.manager.session.story

    async def set_story(self, text: str, extract: bool = True) -> list[Character]:
        """Replace the story text.

        When the new story is longer than the minimum length, characters are
        extracted from it and any names not already tagged are appended.

        Args:
            text: Story text
            extract: Whether to run character extraction

        Returns:
            Characters added by extraction

        Raises:
            ValidationError: If the story exceeds the maximum length
        """
        if len(text) > STORY_MAX_LENGTH:
            raise ValidationError(
                f"Story must be at most {STORY_MAX_LENGTH} characters",
                field="story",
            )

        self.manager.session.story = text
        self.manager.save()

        if not extract or len(text) <= STORY_MIN_LENGTH:
            return []

        return await self.extract_characters()

    async def extract_characters(self) -> list[Character]:
        """Extract names from the current story and tag new ones.

        Names already present (case-insensitively) are skipped.

        Returns:
            Characters that were added
        """
        session = self.manager.session
        generator = CharacterGenerator(self.client)
        names = await generator.extract_characters(session.story)

        added: list[Character] = []
        for name in names:
            if session.get_character_by_name(name):
                continue
            char = Character(name=name)
            session.characters.append(char)
            added.append(char)

        if added:
            logger.info("Extracted %d new character(s): %s", len(added), ", ".join(c.name for c in added))
            self.manager.save()
        return added
