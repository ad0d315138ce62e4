"""Comic style service."""

from typing import Optional

from comicgenius_core_schemas import (
    BORDER_OPTIONS,
    PALETTE_OPTIONS,
    STYLE_OPTIONS,
    BorderStyle,
    ColorPalette,
    ComicStyle,
    ComicStyleName,
)
from comicgenius_storage import SessionManager


def style_options() -> dict[str, list[str]]:
    """Values offered for each style axis."""
    return {
        "style": [s.value for s in STYLE_OPTIONS],
        "palette": [p.value for p in PALETTE_OPTIONS],
        "border": [b.value for b in BORDER_OPTIONS],
    }


class StyleService:
    """Service for reading and changing the comic style."""

    def __init__(self, manager: SessionManager):
        """Initialize service with a session manager."""
        self.manager = manager

    def get_style(self) -> ComicStyle:
        return self.manager.session.style

    def update_style(
        self,
        style: Optional[ComicStyleName] = None,
        palette: Optional[ColorPalette] = None,
        border: Optional[BorderStyle] = None,
    ) -> ComicStyle:
        """Change any of the three style axes.

        Returns:
            Updated style
        """
        current = self.manager.session.style

        if style is not None:
            current.style = style
        if palette is not None:
            current.palette = palette
        if border is not None:
            current.border = border

        self.manager.save()
        return current
