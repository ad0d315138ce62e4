"""Comic script and panel image generator."""

import asyncio
import logging
from typing import Callable, Optional

from pydantic import BaseModel, Field

from comicgenius_gemini_client import GeminiClient, encode_data_url
from comicgenius_core_schemas import (
    MAX_PANELS,
    PANEL_REQUEST_DELAY,
    PLACEHOLDER_IMAGE_URL,
    Character,
    ComicPanel,
    ComicStyle,
    ScriptPanel,
)
from comicgenius_generators.templates import render
from comicgenius_generators.templates.panel import PANEL_PROMPT, SCRIPT_PROMPT

logger = logging.getLogger(__name__)

OnPanelProgress = Callable[[int, int], None]  # current, total


class ComicScript(BaseModel):
    """Structured response for the panel breakdown."""

    panels: list[ScriptPanel] = Field(default_factory=list)


def characters_in_panel(panel: ScriptPanel, characters: list[Character]) -> list[Character]:
    """Return the known characters that appear in a panel.

    Names are compared case-insensitively; the result keeps the order of
    ``characters``.
    """
    names = {pc.name.lower() for pc in panel.characters}
    return [char for char in characters if char.name.lower() in names]


def reference_images_for(characters: list[Character]) -> list[tuple[bytes, str]]:
    """Collect the first uploaded photo of each character.

    Characters whose first photo has no raw file (AI-generated) or who have
    no photos contribute nothing.
    """
    references = []
    for char in characters:
        if not char.photos:
            continue
        photo = char.photos[0]
        if photo.has_file:
            references.append((photo.data, photo.mime_type or "image/png"))
    return references


class ComicGenerator:
    """Turns a story into a sequence of illustrated panels."""

    def __init__(self, client: Optional[GeminiClient] = None):
        """Initialize the comic generator.

        Args:
            client: Gemini client (uses global client if not provided)
        """
        if client is None:
            from comicgenius_gemini_client import get_client

            client = get_client()
        self.client = client

    def build_script_prompt(
        self,
        story: str,
        characters: list[Character],
        style: ComicStyle,
    ) -> str:
        return render(
            SCRIPT_PROMPT,
            character_names=[c.name for c in characters],
            style=style.style.value,
            max_panels=MAX_PANELS,
            story=story,
        )

    def build_panel_prompt(
        self,
        panel: ScriptPanel,
        style: ComicStyle,
    ) -> str:
        return render(
            PANEL_PROMPT,
            style=style.style.value,
            palette=style.palette.value,
            narration=panel.narration,
            names=[pc.name for pc in panel.characters],
            dialogue=[pc for pc in panel.characters if pc.dialogue],
        )

    async def generate_script(
        self,
        story: str,
        characters: list[Character],
        style: ComicStyle,
    ) -> list[ScriptPanel]:
        """Break the story down into panels.

        Returns an empty list if the model call fails.
        """
        prompt = self.build_script_prompt(story, characters, style)
        try:
            script = await self.client.generate_structured(
                prompt=prompt,
                response_schema=ComicScript,
                model=self.client.script_model,
            )
        except Exception:
            logger.exception("Error generating comic panel text")
            return []

        return script.panels

    async def generate_panel_image(
        self,
        panel: ScriptPanel,
        characters: list[Character],
        style: ComicStyle,
    ) -> str:
        """Draw one panel, returning a data URL or the placeholder URL."""
        present = characters_in_panel(panel, characters)
        references = reference_images_for(present)
        prompt = self.build_panel_prompt(panel, style)

        try:
            image_data, mime_type = await self.client.generate_image(
                prompt=prompt,
                reference_images=references or None,
            )
        except Exception:
            logger.exception("Error generating image for panel %s", panel.panel_number)
            return PLACEHOLDER_IMAGE_URL

        return encode_data_url(image_data, mime_type)

    async def generate_panels(
        self,
        story: str,
        characters: list[Character],
        style: ComicStyle,
        on_progress: Optional[OnPanelProgress] = None,
        delay: float = PANEL_REQUEST_DELAY,
    ) -> list[ComicPanel]:
        """Generate the script, then each panel's image.

        Panels are drawn strictly one at a time with ``delay`` seconds
        between requests to stay under the image endpoint's rate limit.
        A failed panel keeps its text and gets the placeholder image.

        Args:
            story: Story text
            characters: Characters with their reference photos
            style: Visual style
            on_progress: Called with (done, total) after each panel
            delay: Seconds to wait between panel requests

        Returns:
            Panels in script order (empty if scripting failed)
        """
        script = await self.generate_script(story, characters, style)
        if not script:
            return []

        total = len(script)
        panels: list[ComicPanel] = []

        for index, scripted in enumerate(script, start=1):
            generated_image = await self.generate_panel_image(scripted, characters, style)
            panels.append(
                ComicPanel(
                    panel_number=scripted.panel_number,
                    narration=scripted.narration,
                    characters=scripted.characters,
                    generated_image=generated_image,
                )
            )

            if on_progress:
                on_progress(index, total)

            if index < total and delay > 0:
                await asyncio.sleep(delay)

        return panels
