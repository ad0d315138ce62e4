"""Shared limits and option lists."""

from comicgenius_core_schemas.models import BorderStyle, ColorPalette, ComicStyleName

STORY_MIN_LENGTH = 100
STORY_MAX_LENGTH = 10000
MAX_PANELS = 12

# Regex fallback for character extraction keeps at most this many names
EXTRACTION_FALLBACK_LIMIT = 5

# Seconds between panel image requests (external rate limit)
PANEL_REQUEST_DELAY = 5.0

# Seconds between video job status checks
VIDEO_POLL_INTERVAL = 10.0

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/300x400.png?text=Generation+Failed"

STYLE_OPTIONS: list[ComicStyleName] = [
    ComicStyleName.COMIC_BOOK,
    ComicStyleName.MANGA,
    ComicStyleName.CARTOON,
    ComicStyleName.REALISTIC,
]

PALETTE_OPTIONS: list[ColorPalette] = [
    ColorPalette.VIBRANT,
    ColorPalette.MUTED,
    ColorPalette.BLACK_AND_WHITE,
    ColorPalette.PASTEL,
]

BORDER_OPTIONS: list[BorderStyle] = [
    BorderStyle.SHARP,
    BorderStyle.ROUNDED,
    BorderStyle.THICK,
    BorderStyle.NONE,
]
