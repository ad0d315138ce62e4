"""Character management service."""

from typing import Optional

from comicgenius_generators.character import CharacterGenerator
from comicgenius_gemini_client import GeminiClient, encode_data_url
from comicgenius_core_schemas import (
    Character,
    CharacterPhoto,
    NotFoundError,
    ValidationError,
)
from comicgenius_storage import SessionManager


class CharacterService:
    """Service for character management operations."""

    def __init__(self, manager: SessionManager, client: Optional[GeminiClient] = None):
        """Initialize service with a session manager."""
        self.manager = manager
        self.client = client

    def list_characters(
        self,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Character], int]:
        """List all characters with pagination.

        Returns:
            Tuple of (characters, total_count)
        """
        characters = self.manager.session.characters
        total = len(characters)
        return characters[offset:offset + limit], total

    def get_character(self, character_id: str) -> Character:
        """Get character by ID.

        Raises:
            NotFoundError: If character not found
        """
        char = self.manager.session.get_character_by_id(character_id)
        if not char:
            raise NotFoundError("Character", character_id)
        return char

    def _clean_name(self, name: str) -> str:
        name = name.strip()
        if not name:
            raise ValidationError("Character name cannot be empty", field="name")
        return name

    def create_character(self, name: str) -> Character:
        """Add a character with no photos.

        Raises:
            ValidationError: If the name is blank
        """
        char = Character(name=self._clean_name(name))
        self.manager.session.characters.append(char)
        self.manager.save()
        return char

    def rename_character(self, character_id: str, name: str) -> Character:
        """Rename a character."""
        char = self.get_character(character_id)
        char.name = self._clean_name(name)
        self.manager.save()
        return char

    def delete_character(self, character_id: str) -> bool:
        """Delete a character.

        Returns:
            True if deleted
        """
        chars = self.manager.session.characters
        for i, char in enumerate(chars):
            if char.id == character_id:
                chars.pop(i)
                self.manager.save()
                return True
        return False

    def add_photos(
        self,
        character_id: str,
        files: list[tuple[bytes, str]],
    ) -> list[CharacterPhoto]:
        """Attach uploaded photos to a character.

        Args:
            character_id: Character to attach to
            files: (data, mime_type) for each uploaded file

        Returns:
            The new photos, in upload order
        """
        char = self.get_character(character_id)

        photos = []
        for data, mime_type in files:
            if not mime_type.startswith("image/"):
                raise ValidationError(
                    f"Unsupported photo type '{mime_type}'",
                    field="photos",
                )
            photos.append(
                CharacterPhoto(
                    url=encode_data_url(data, mime_type),
                    data=data,
                    mime_type=mime_type,
                )
            )

        char.photos.extend(photos)
        self.manager.save()
        return photos

    def remove_photo(self, character_id: str, photo_id: str) -> bool:
        """Remove one photo from a character.

        Returns:
            True if removed
        """
        char = self.get_character(character_id)
        for i, photo in enumerate(char.photos):
            if photo.id == photo_id:
                char.photos.pop(i)
                self.manager.save()
                return True
        return False

    async def generate_image(
        self,
        character_id: str,
        description: Optional[str] = None,
    ) -> CharacterPhoto:
        """Draw an AI image of the character and attach it as a photo.

        The photo has no raw file, so it is shown to the user but not sent
        as a reference when drawing panels.

        Raises:
            NotFoundError: If character not found
            GenerationError: If the image could not be generated
        """
        char = self.get_character(character_id)
        generator = CharacterGenerator(self.client)
        url = await generator.generate_character_image(char.name, description)

        # Deleted while the image was generating
        char = self.get_character(character_id)
        photo = CharacterPhoto(url=url)
        char.photos.append(photo)
        self.manager.save()
        return photo
