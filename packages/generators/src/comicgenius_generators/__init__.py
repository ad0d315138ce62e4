"""Generation pipelines for ComicGenius."""

from .character import CharacterGenerator, fallback_character_names
from .comic import ComicGenerator, characters_in_panel, reference_images_for
from .video import VideoGenerator, build_voiceover_script

__all__ = [
    "CharacterGenerator",
    "ComicGenerator",
    "VideoGenerator",
    "build_voiceover_script",
    "characters_in_panel",
    "fallback_character_names",
    "reference_images_for",
]
