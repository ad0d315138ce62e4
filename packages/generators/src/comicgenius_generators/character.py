"""Character extraction and character image generation."""

import logging
import re
from typing import Optional

from pydantic import BaseModel, Field

from comicgenius_gemini_client import GeminiClient, encode_data_url
from comicgenius_core_schemas import EXTRACTION_FALLBACK_LIMIT, GenerationError
from comicgenius_generators.templates import render
from comicgenius_generators.templates.character import (
    CHARACTER_IMAGE_PROMPT,
    EXTRACTION_PROMPT,
)

logger = logging.getLogger(__name__)

PROPER_NOUN_RE = re.compile(r"[A-Z][a-z]+")


class ExtractedCharacters(BaseModel):
    """Structured response for character extraction."""

    characters: list[str] = Field(default_factory=list, description="A character name.")


def fallback_character_names(story: str, limit: int = EXTRACTION_FALLBACK_LIMIT) -> list[str]:
    """Scan a story for capitalized words as a stand-in for name extraction.

    Returns unique matches in first-seen order, capped at ``limit``.
    """
    unique = dict.fromkeys(PROPER_NOUN_RE.findall(story))
    return list(unique)[:limit]


class CharacterGenerator:
    """Finds characters in a story and draws character images."""

    def __init__(self, client: Optional[GeminiClient] = None):
        """Initialize the character generator.

        Args:
            client: Gemini client (uses global client if not provided)
        """
        if client is None:
            from comicgenius_gemini_client import get_client

            client = get_client()
        self.client = client

    async def extract_characters(self, story: str) -> list[str]:
        """Extract character names from story text.

        Any failure of the model call falls back to a proper-noun scan, so
        this never raises for AI errors.
        """
        prompt = render(EXTRACTION_PROMPT, story=story)
        try:
            result = await self.client.generate_structured(
                prompt=prompt,
                response_schema=ExtractedCharacters,
                model=self.client.text_model,
            )
            return [name.strip() for name in result.characters if name and name.strip()]
        except Exception:
            logger.exception("Error extracting characters")
            return fallback_character_names(story)

    async def generate_character_image(
        self,
        name: str,
        description: Optional[str] = None,
    ) -> str:
        """Generate an anime-style full-body image of a character.

        Returns:
            The image as a data URL

        Raises:
            GenerationError: If the model returns no image
        """
        prompt = render(CHARACTER_IMAGE_PROMPT, name=name, description=description)
        try:
            image_data, mime_type = await self.client.generate_image(prompt=prompt)
        except Exception as e:
            logger.exception("Error generating anime character %s", name)
            raise GenerationError(
                "Failed to generate anime character",
                details={"character_name": name, "cause": str(e)},
            ) from e

        return encode_data_url(image_data, mime_type)
