"""Core data models for ComicGenius."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


def new_id() -> str:
    """Generate a short random identifier."""
    return uuid.uuid4().hex[:9]


class ComicStyleName(str, Enum):
    """Visual style of the comic."""

    COMIC_BOOK = "Comic Book"
    MANGA = "Manga"
    CARTOON = "Cartoon"
    REALISTIC = "Realistic"
    WATERCOLOR = "Watercolor"
    RETRO = "Retro"


class ColorPalette(str, Enum):
    """Color palette of the comic."""

    VIBRANT = "Vibrant"
    MUTED = "Muted"
    BLACK_AND_WHITE = "Black & White"
    NEON = "Neon"
    PASTEL = "Pastel"


class BorderStyle(str, Enum):
    """Panel border treatment."""

    SHARP = "Sharp"
    ROUNDED = "Rounded"
    NONE = "No Borders"
    THICK = "Thick Outlines"


class WizardStep(int, Enum):
    """Steps of the story wizard."""

    WRITE_STORY = 1
    DEFINE_CHARACTERS = 2
    CHOOSE_STYLE = 3
    GENERATE_COMIC = 4

    @property
    def label(self) -> str:
        return {
            WizardStep.WRITE_STORY: "Write Story",
            WizardStep.DEFINE_CHARACTERS: "Define Characters",
            WizardStep.CHOOSE_STYLE: "Choose Style",
            WizardStep.GENERATE_COMIC: "Generate Comic",
        }[self]


# === Core Models ===


class CharacterPhoto(BaseModel):
    """A reference photo attached to a character.

    ``url`` is always displayable (a data URL). ``data`` holds the raw
    uploaded bytes and is only present for user uploads; AI-generated
    photos carry a URL only.
    """

    id: str = Field(default_factory=new_id)
    url: str
    data: Optional[bytes] = Field(default=None, exclude=True)
    mime_type: Optional[str] = None

    @property
    def has_file(self) -> bool:
        return self.data is not None


class Character(BaseModel):
    """A character in the story."""

    id: str = Field(default_factory=new_id)
    name: str
    photos: list[CharacterPhoto] = Field(default_factory=list)

    @model_validator(mode='after')
    def strip_name(self) -> 'Character':
        """Normalize surrounding whitespace in the name."""
        self.name = self.name.strip()
        return self


class ComicStyle(BaseModel):
    """Visual configuration, one value per axis."""

    style: ComicStyleName = ComicStyleName.COMIC_BOOK
    palette: ColorPalette = ColorPalette.VIBRANT
    border: BorderStyle = BorderStyle.SHARP


class PanelCharacter(BaseModel):
    """A character's line in a panel."""

    name: str
    dialogue: str = ""


class ScriptPanel(BaseModel):
    """Textual breakdown of a panel, as written by the language model."""

    panel_number: int
    narration: str = ""
    characters: list[PanelCharacter] = Field(default_factory=list)


class ComicPanel(ScriptPanel):
    """A finished panel with its generated image."""

    generated_image: str

    @property
    def has_image_data(self) -> bool:
        return self.generated_image.startswith("data:")


class GeneratedVideo(BaseModel):
    """An animated panel."""

    panel_number: int
    data: bytes = Field(exclude=True)
    mime_type: str = "video/mp4"
    aspect_ratio: str = "16:9"
    uri: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)


class GenerationProgress(BaseModel):
    """Panel generation progress."""

    current: int = 0
    total: int = 0


class ComicSession(BaseModel):
    """In-memory wizard state for one user."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    story: str = ""
    characters: list[Character] = Field(default_factory=list)
    style: ComicStyle = Field(default_factory=ComicStyle)
    panels: list[ComicPanel] = Field(default_factory=list)
    current_step: WizardStep = WizardStep.WRITE_STORY
    progress: GenerationProgress = Field(default_factory=GenerationProgress)
    generating: bool = False
    videos: dict[int, GeneratedVideo] = Field(default_factory=dict)

    def get_character_by_id(self, character_id: str) -> Optional[Character]:
        """Get character by ID."""
        for char in self.characters:
            if char.id == character_id:
                return char
        return None

    def get_character_by_name(self, name: str) -> Optional[Character]:
        """Get character by name (case-insensitive)."""
        name_lower = name.lower()
        for char in self.characters:
            if char.name.lower() == name_lower:
                return char
        return None

    def get_panel(self, panel_number: int) -> Optional[ComicPanel]:
        """Get panel by its number."""
        for panel in self.panels:
            if panel.panel_number == panel_number:
                return panel
        return None
