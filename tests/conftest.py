"""Shared fixtures: a fake Gemini client and fresh in-memory state."""

import io
from typing import Any, Optional

import pytest
from PIL import Image

import comicgenius_services.job as job_module
import comicgenius_storage.storage as storage_module
from comicgenius_gemini_client import encode_data_url, set_client
from comicgenius_services import JobService
from comicgenius_storage import MemoryStore, SessionManager

STORY = (
    "Mira found a dragon egg behind the old lighthouse. She carried it home "
    "through the storm while her brother Teo kept watch for the fishermen."
)


def png_bytes(width: int = 64, height: int = 48, color: str = "red") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


def png_data_url(width: int = 64, height: int = 48) -> str:
    return encode_data_url(png_bytes(width, height), "image/png")


class FakeGeminiClient:
    """Stands in for GeminiClient; records calls and returns canned data."""

    text_model = "fake-text"
    script_model = "fake-script"
    image_model = "fake-image"
    video_model = "fake-video"

    def __init__(self):
        # Schema class name -> dict payload or exception to raise
        self.structured: dict[str, Any] = {}
        self.image = (png_bytes(), "image/png")
        self.failing_images: set[int] = set()
        self.image_error: Optional[Exception] = None
        self.video = (b"fake-mp4-bytes", "https://example.invalid/video.mp4")
        self.video_error: Optional[Exception] = None

        self.structured_calls: list[dict] = []
        self.image_calls: list[dict] = []
        self.video_calls: list[dict] = []

    async def generate_structured(self, prompt, response_schema, model=None, **kwargs):
        self.structured_calls.append(
            {"prompt": prompt, "schema": response_schema.__name__, "model": model}
        )
        response = self.structured.get(response_schema.__name__)
        if isinstance(response, Exception):
            raise response
        if response is None:
            raise RuntimeError("No response from AI")
        return response_schema.model_validate(response)

    async def generate_image(self, prompt, reference_images=None, model=None):
        self.image_calls.append({"prompt": prompt, "reference_images": reference_images})
        if self.image_error or len(self.image_calls) in self.failing_images:
            raise self.image_error or RuntimeError("No image data received from AI")
        return self.image

    async def generate_video(
        self,
        prompt,
        image_data,
        mime_type,
        aspect_ratio="16:9",
        poll_interval=10.0,
        on_status=None,
        model=None,
    ):
        self.video_calls.append(
            {
                "prompt": prompt,
                "image_data": image_data,
                "mime_type": mime_type,
                "aspect_ratio": aspect_ratio,
                "poll_interval": poll_interval,
            }
        )
        if on_status:
            on_status("Processing video generation (this may take a few minutes)...")
        if self.video_error:
            raise self.video_error
        return self.video

    def script(self, *panels: dict) -> None:
        self.structured["ComicScript"] = {"panels": list(panels)}


@pytest.fixture
def fake_client():
    client = FakeGeminiClient()
    set_client(client)
    yield client
    set_client(None)


@pytest.fixture
def store(monkeypatch):
    """Fresh global session store."""
    fresh = MemoryStore()
    monkeypatch.setattr(storage_module, "_store", fresh)
    return fresh


@pytest.fixture
def jobs(monkeypatch):
    """Fresh global job service."""
    fresh = JobService()
    monkeypatch.setattr(job_module, "_job_service", fresh)
    return fresh


@pytest.fixture
def manager(store):
    return SessionManager.create(store)
