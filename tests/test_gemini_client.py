"""Tests for the Gemini client wrapper and image helpers."""

import asyncio
from types import SimpleNamespace

import pytest
from pydantic import BaseModel

from comicgenius_gemini_client import (
    GeminiClient,
    decode_data_url,
    detect_aspect_ratio,
    encode_data_url,
)
from conftest import png_bytes


class Names(BaseModel):
    characters: list[str]


def make_client(**aio) -> GeminiClient:
    client = GeminiClient(api_key="test-key")
    client.client = SimpleNamespace(aio=SimpleNamespace(**aio))
    return client


def text_response(text, finish_reason=None):
    return SimpleNamespace(
        candidates=[SimpleNamespace(finish_reason=finish_reason)],
        text=text,
    )


class TestDataUrls:
    def test_decode_returns_bytes_and_mime(self):
        data, mime = decode_data_url(encode_data_url(b"\x89PNG", "image/jpeg"))
        assert data == b"\x89PNG"
        assert mime == "image/jpeg"

    def test_decode_rejects_remote_url(self):
        with pytest.raises(ValueError):
            decode_data_url("https://via.placeholder.com/400x300?text=Image+Generation+Failed")


class TestAspectRatio:
    def test_landscape_is_16_9(self):
        assert detect_aspect_ratio(png_bytes(1024, 576)) == "16:9"

    def test_portrait_is_9_16(self):
        assert detect_aspect_ratio(png_bytes(576, 1024)) == "9:16"

    def test_square_is_9_16(self):
        assert detect_aspect_ratio(png_bytes(512, 512)) == "9:16"

    def test_garbage_defaults_to_16_9(self):
        assert detect_aspect_ratio(b"not an image") == "16:9"


class TestClientInit:
    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        with pytest.raises(ValueError, match="GOOGLE_API_KEY"):
            GeminiClient()

    def test_default_models(self):
        client = GeminiClient(api_key="test-key")
        assert client.text_model == "gemini-2.5-flash"
        assert client.script_model == "gemini-2.5-pro"
        assert client.image_model == "gemini-2.5-flash-image"
        assert client.video_model == "veo-3.1-generate-preview"


class TestGenerateStructured:
    def test_parses_fenced_json(self):
        async def generate_content(**kwargs):
            return text_response('```json\n{"characters": ["Mira", "Teo"]}\n```')

        client = make_client(models=SimpleNamespace(generate_content=generate_content))
        result = asyncio.run(client.generate_structured("prompt", Names))
        assert result.characters == ["Mira", "Teo"]

    def test_empty_text_raises(self):
        async def generate_content(**kwargs):
            return text_response("   ")

        client = make_client(models=SimpleNamespace(generate_content=generate_content))
        with pytest.raises(RuntimeError, match="No response from AI"):
            asyncio.run(client.generate_structured("prompt", Names))

    def test_uses_requested_model(self):
        seen = {}

        async def generate_content(**kwargs):
            seen.update(kwargs)
            return text_response('{"characters": []}')

        client = make_client(models=SimpleNamespace(generate_content=generate_content))
        asyncio.run(client.generate_structured("prompt", Names, model=client.script_model))
        assert seen["model"] == "gemini-2.5-pro"


class TestGenerateImage:
    def test_returns_first_inline_image(self):
        seen = {}

        async def generate_content(**kwargs):
            seen.update(kwargs)
            parts = [
                SimpleNamespace(inline_data=None, text="here you go"),
                SimpleNamespace(inline_data=SimpleNamespace(data=b"img", mime_type="image/png")),
            ]
            return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])

        client = make_client(models=SimpleNamespace(generate_content=generate_content))
        data, mime = asyncio.run(
            client.generate_image("draw", reference_images=[(b"ref", "image/jpeg")])
        )

        assert (data, mime) == (b"img", "image/png")
        assert seen["contents"][0] == "draw"
        assert len(seen["contents"]) == 2

    def test_text_only_response_raises(self):
        async def generate_content(**kwargs):
            parts = [SimpleNamespace(inline_data=None, text="sorry")]
            return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])

        client = make_client(models=SimpleNamespace(generate_content=generate_content))
        with pytest.raises(RuntimeError, match="No image data received from AI"):
            asyncio.run(client.generate_image("draw"))


class TestGenerateVideo:
    def operation(self, done, uri="files/video-1"):
        video = SimpleNamespace(uri=uri)
        return SimpleNamespace(
            name="operations/1",
            done=done,
            error=None,
            response=SimpleNamespace(generated_videos=[SimpleNamespace(video=video)]) if done else None,
        )

    def test_polls_until_done_then_downloads(self):
        polls = []
        submitted = {}

        async def generate_videos(**kwargs):
            submitted.update(kwargs)
            return self.operation(done=False)

        async def get(operation):
            polls.append(operation)
            return self.operation(done=len(polls) >= 3)

        async def download(file):
            return b"mp4-data"

        client = make_client(
            models=SimpleNamespace(generate_videos=generate_videos),
            operations=SimpleNamespace(get=get),
            files=SimpleNamespace(download=download),
        )
        statuses = []
        data, uri = asyncio.run(
            client.generate_video(
                "animate",
                b"img",
                "image/png",
                aspect_ratio="9:16",
                poll_interval=0,
                on_status=statuses.append,
            )
        )

        assert data == b"mp4-data"
        assert uri == "files/video-1"
        assert len(polls) == 3
        assert submitted["config"].aspect_ratio == "9:16"
        assert submitted["config"].number_of_videos == 1
        assert statuses[0].startswith("Processing video generation")
        assert statuses[-1] == "Downloading video..."

    def test_missing_video_raises(self):
        async def generate_videos(**kwargs):
            return SimpleNamespace(
                name="operations/1",
                done=True,
                error=None,
                response=SimpleNamespace(generated_videos=[]),
            )

        client = make_client(models=SimpleNamespace(generate_videos=generate_videos))
        with pytest.raises(RuntimeError, match="No video generated"):
            asyncio.run(client.generate_video("animate", b"img", "image/png", poll_interval=0))
