"""Core domain models for ComicGenius."""

from comicgenius_core_schemas.models import (
    # Enums
    BorderStyle,
    ColorPalette,
    ComicStyleName,
    WizardStep,
    # Domain Models
    Character,
    CharacterPhoto,
    ComicPanel,
    ComicSession,
    ComicStyle,
    GeneratedVideo,
    GenerationProgress,
    PanelCharacter,
    ScriptPanel,
    # Utilities
    new_id,
)
from comicgenius_core_schemas.exceptions import (
    GenerationError,
    NotFoundError,
    ServiceError,
    ValidationError,
    WizardError,
)
from comicgenius_core_schemas.constants import (
    BORDER_OPTIONS,
    EXTRACTION_FALLBACK_LIMIT,
    MAX_PANELS,
    PALETTE_OPTIONS,
    PANEL_REQUEST_DELAY,
    PLACEHOLDER_IMAGE_URL,
    STORY_MAX_LENGTH,
    STORY_MIN_LENGTH,
    STYLE_OPTIONS,
    VIDEO_POLL_INTERVAL,
)

__all__ = [
    # Enums
    "BorderStyle",
    "ColorPalette",
    "ComicStyleName",
    "WizardStep",
    # Domain Models
    "Character",
    "CharacterPhoto",
    "ComicPanel",
    "ComicSession",
    "ComicStyle",
    "GeneratedVideo",
    "GenerationProgress",
    "PanelCharacter",
    "ScriptPanel",
    # Utilities
    "new_id",
    # Constants
    "BORDER_OPTIONS",
    "EXTRACTION_FALLBACK_LIMIT",
    "MAX_PANELS",
    "PALETTE_OPTIONS",
    "PANEL_REQUEST_DELAY",
    "PLACEHOLDER_IMAGE_URL",
    "STORY_MAX_LENGTH",
    "STORY_MIN_LENGTH",
    "STYLE_OPTIONS",
    "VIDEO_POLL_INTERVAL",
    # Exceptions
    "GenerationError",
    "NotFoundError",
    "ServiceError",
    "ValidationError",
    "WizardError",
]
