"""Tests for the command-line interface."""

import re

import pytest
from typer.testing import CliRunner

from comicgenius_cli.cli import app, parse_pair
from conftest import STORY, png_bytes

runner = CliRunner()


@pytest.fixture
def story_file(tmp_path):
    path = tmp_path / "story.txt"
    path.write_text(STORY, encoding="utf-8")
    return path


def test_parse_pair():
    assert parse_pair("Mira:photos/mira.png") == ("Mira", "photos/mira.png")
    assert parse_pair(" Teo ") == ("Teo", None)
    assert parse_pair("Ola:Look: a dragon!") == ("Ola", "Look: a dragon!")


def test_extract_lists_names(story_file, fake_client):
    fake_client.structured["ExtractedCharacters"] = {"characters": ["Mira", "Teo"]}

    result = runner.invoke(app, ["extract", str(story_file)])

    assert result.exit_code == 0, result.output
    assert "Mira" in result.output
    assert "Teo" in result.output


def test_extract_missing_file(tmp_path, fake_client):
    result = runner.invoke(app, ["extract", str(tmp_path / "missing.txt")])
    assert result.exit_code == 1


def test_create_writes_pdf_and_images(story_file, tmp_path, fake_client, store):
    photo = tmp_path / "mira.png"
    photo.write_bytes(png_bytes())
    fake_client.script(
        {"panel_number": 1, "narration": "Egg.", "characters": [{"name": "Mira", "dialogue": "Oh!"}]},
        {"panel_number": 2, "narration": "Storm."},
    )
    output = tmp_path / "comic.pdf"
    images = tmp_path / "panels"

    result = runner.invoke(
        app,
        [
            "create",
            str(story_file),
            "-c", f"Mira:{photo}",
            "--no-extract",
            "--style", "Manga",
            "--delay", "0",
            "-o", str(output),
            "--images-dir", str(images),
        ],
    )

    assert result.exit_code == 0, result.output
    assert output.read_bytes().startswith(b"%PDF")
    assert sorted(p.name for p in images.iterdir()) == ["panel-01.png", "panel-02.png"]
    assert fake_client.image_calls[0]["reference_images"] == [(png_bytes(), "image/png")]
    assert fake_client.structured_calls[0]["schema"] == "ComicScript"


def test_create_needs_a_character(story_file, tmp_path, fake_client, store):
    result = runner.invoke(
        app,
        ["create", str(story_file), "--no-extract", "--delay", "0", "-o", str(tmp_path / "c.pdf")],
    )
    assert result.exit_code == 1
    assert re.search(r"Add at least one character", result.output)


def test_create_rejects_unknown_photo_type(story_file, tmp_path, fake_client, store):
    photo = tmp_path / "mira.xyz"
    photo.write_bytes(png_bytes())

    result = runner.invoke(
        app,
        ["create", str(story_file), "-c", f"Mira:{photo}", "--no-extract", "--delay", "0"],
    )

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert fake_client.image_calls == []


def test_character_image(tmp_path, fake_client):
    output = tmp_path / "mira.png"

    result = runner.invoke(app, ["character-image", "Mira", "-d", "red scarf", "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert output.read_bytes() == fake_client.image[0]


def test_animate(tmp_path, fake_client):
    image = tmp_path / "panel.png"
    image.write_bytes(png_bytes(400, 800))
    output = tmp_path / "panel.mp4"

    result = runner.invoke(
        app,
        ["animate", str(image), "-n", "Night falls.", "-c", "Mira:Look!", "-o", str(output), "--poll-interval", "0"],
    )

    assert result.exit_code == 0, result.output
    assert output.read_bytes() == b"fake-mp4-bytes"
    assert fake_client.video_calls[0]["aspect_ratio"] == "9:16"
    assert 'Mira: "Look!"' in fake_client.video_calls[0]["prompt"]
