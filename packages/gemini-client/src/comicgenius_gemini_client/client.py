"""Gemini API client wrapper for ComicGenius."""

import asyncio
import logging
import os
from typing import Any, Callable, Optional, Type, TypeVar

from google import genai
from google.genai import types
from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


class GeminiClient:
    """Wrapper for Google Gemini API."""

    TEXT_MODEL = "gemini-2.5-flash"
    SCRIPT_MODEL = "gemini-2.5-pro"
    IMAGE_MODEL = "gemini-2.5-flash-image"
    VIDEO_MODEL = "veo-3.1-generate-preview"

    def __init__(
        self,
        api_key: Optional[str] = None,
        text_model: Optional[str] = None,
        script_model: Optional[str] = None,
        image_model: Optional[str] = None,
        video_model: Optional[str] = None,
    ):
        """Initialize Gemini client.

        Args:
            api_key: Google API key (defaults to GOOGLE_API_KEY env var)
            text_model: Model for short structured calls (character extraction)
            script_model: Model for panel script writing
            image_model: Model for image generation
            video_model: Model for video generation
        """
        # Standardize on GOOGLE_API_KEY (unset GEMINI_API_KEY to avoid SDK warning)
        if "GEMINI_API_KEY" in os.environ:
            del os.environ["GEMINI_API_KEY"]

        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError(
                "GOOGLE_API_KEY environment variable is required. "
                "Get one at https://aistudio.google.com/apikey"
            )

        self.text_model = text_model or self.TEXT_MODEL
        self.script_model = script_model or self.SCRIPT_MODEL
        self.image_model = image_model or self.IMAGE_MODEL
        self.video_model = video_model or self.VIDEO_MODEL

        self.client = genai.Client(api_key=self.api_key)

    def _extract_json_text(self, response) -> str:
        """Extract and clean JSON text from a Gemini response.

        Handles:
        - None responses
        - Missing or empty candidates
        - Code fences (```json ... ```)

        Raises:
            RuntimeError: If no valid JSON text can be extracted
        """
        if response is None:
            raise RuntimeError("Gemini API returned None response")

        if not getattr(response, "candidates", None):
            raise RuntimeError(
                "Gemini API response has no candidates. "
                "This may indicate content was blocked or an API error occurred."
            )

        candidate = response.candidates[0]

        finish_reason = getattr(candidate, "finish_reason", None)
        if finish_reason and "SAFETY" in str(finish_reason):
            raise RuntimeError(
                f"Gemini blocked response due to safety filters: {finish_reason}"
            )

        text = response.text
        if text is None or not text.strip():
            raise RuntimeError("No response from AI")

        # Strip code fences if present (```json ... ``` or ``` ... ```)
        text = text.strip()
        if text.startswith("```"):
            first_newline = text.find("\n")
            if first_newline != -1:
                text = text[first_newline + 1:]
            else:
                text = text[3:]

        if text.endswith("```"):
            text = text[:-3]

        return text.strip()

    async def generate_structured(
        self,
        prompt: str,
        response_schema: Type[T],
        model: Optional[str] = None,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> T:
        """Generate structured output matching a Pydantic schema.

        Args:
            prompt: User prompt
            response_schema: Pydantic model class for response
            model: Override the text model for this call
            system_instruction: System instruction for the model
            temperature: Sampling temperature (model default if None)

        Returns:
            Parsed response matching the schema

        Raises:
            RuntimeError: If the response is empty, blocked, or not valid JSON
        """
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=response_schema,
        )
        if temperature is not None:
            config.temperature = temperature
        if system_instruction:
            config.system_instruction = system_instruction

        response = await self.client.aio.models.generate_content(
            model=model or self.text_model,
            contents=prompt,
            config=config,
        )

        json_text = self._extract_json_text(response)

        try:
            return response_schema.model_validate_json(json_text)
        except Exception as e:
            preview = json_text[:200] + "..." if len(json_text) > 200 else json_text
            raise RuntimeError(
                f"Failed to parse Gemini response as {response_schema.__name__}: {e}\n"
                f"Response preview: {preview}"
            ) from e

    async def generate_image(
        self,
        prompt: str,
        reference_images: Optional[list[tuple[bytes, str]]] = None,
        model: Optional[str] = None,
    ) -> tuple[bytes, str]:
        """Generate an image.

        Args:
            prompt: Image generation prompt
            reference_images: Optional list of (data, mime_type) tuples sent
                after the prompt as inline parts
            model: Override the image model for this call

        Returns:
            Tuple of (image_data, mime_type)

        Raises:
            RuntimeError: If the response carries no image
        """
        contents: list[Any] = [prompt]
        for data, mime_type in reference_images or []:
            contents.append(types.Part.from_bytes(data=data, mime_type=mime_type))

        config = types.GenerateContentConfig(
            response_modalities=["IMAGE"],
        )

        response = await self.client.aio.models.generate_content(
            model=model or self.image_model,
            contents=contents,
            config=config,
        )

        if not getattr(response, "candidates", None):
            raise RuntimeError("No image data received from AI")

        candidate = response.candidates[0]
        parts = candidate.content.parts if candidate.content else None
        for part in parts or []:
            if part.inline_data is not None and part.inline_data.data:
                return part.inline_data.data, part.inline_data.mime_type or "image/png"

        raise RuntimeError("No image data received from AI")

    async def generate_video(
        self,
        prompt: str,
        image_data: bytes,
        mime_type: str,
        aspect_ratio: str = "16:9",
        poll_interval: float = 10.0,
        on_status: Optional[Callable[[str], None]] = None,
        model: Optional[str] = None,
    ) -> tuple[bytes, Optional[str]]:
        """Animate an image into a short video.

        Submits the job, polls it every ``poll_interval`` seconds until the
        operation reports done, then downloads the first generated video.
        There is no timeout.

        Args:
            prompt: Animation prompt
            image_data: Source image bytes
            mime_type: Source image MIME type
            aspect_ratio: 16:9 or 9:16
            poll_interval: Seconds between status checks
            on_status: Called with a short message on each poll
            model: Override the video model for this call

        Returns:
            Tuple of (video_data, remote_uri)

        Raises:
            RuntimeError: If no video is produced
        """
        operation = await self.client.aio.models.generate_videos(
            model=model or self.video_model,
            prompt=prompt,
            image=types.Image(image_bytes=image_data, mime_type=mime_type),
            config=types.GenerateVideosConfig(
                number_of_videos=1,
                duration_seconds=8,
                resolution="720p",
                enhance_prompt=True,
                aspect_ratio=aspect_ratio,
                generate_audio=True,
            ),
        )

        if on_status:
            on_status("Processing video generation (this may take a few minutes)...")

        while not operation.done:
            await asyncio.sleep(poll_interval)
            operation = await self.client.aio.operations.get(operation)
            logger.debug("Polled video operation %s (done=%s)", operation.name, operation.done)
            if on_status:
                on_status("Still generating video...")

        if operation.error:
            raise RuntimeError(f"Video operation failed: {operation.error}")

        generated = operation.response.generated_videos if operation.response else None
        if not generated:
            raise RuntimeError("No video generated")

        video = generated[0].video
        if video is None or not video.uri:
            raise RuntimeError("No video URI received from AI")

        if on_status:
            on_status("Downloading video...")

        data = await self.client.aio.files.download(file=video)
        return data, video.uri


# Singleton instance for convenience
_client: Optional[GeminiClient] = None


def get_client() -> GeminiClient:
    """Get or create the global Gemini client."""
    global _client
    if _client is None:
        _client = GeminiClient()
    return _client


def set_client(client: Optional[GeminiClient]) -> None:
    """Set (or reset with None) the global Gemini client."""
    global _client
    _client = client
