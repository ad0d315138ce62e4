"""Tests for the session services."""

import asyncio
from datetime import datetime, timedelta

import pytest

from comicgenius_core_schemas import (
    PLACEHOLDER_IMAGE_URL,
    BorderStyle,
    ComicPanel,
    ComicStyleName,
    GenerationError,
    NotFoundError,
    ValidationError,
    WizardError,
    WizardStep,
)
from comicgenius_services import (
    CharacterService,
    ComicService,
    ExportService,
    JobService,
    JobStatus,
    SessionService,
    StoryService,
    StyleService,
    VideoService,
    WizardService,
    style_options,
)
from conftest import STORY, png_data_url


class TestSessionService:
    def test_create_and_load(self, store):
        service = SessionService(store)
        session = service.create()

        assert service.get(session.id) is session
        assert session.current_step == WizardStep.WRITE_STORY
        assert session.story == ""

    def test_unknown_session(self, store):
        with pytest.raises(NotFoundError):
            SessionService(store).load("missing")

    def test_delete(self, store):
        service = SessionService(store)
        session = service.create()
        assert service.delete(session.id)
        assert not service.delete(session.id)
        assert service.list_sessions() == ([], 0)


class TestWizard:
    def test_cannot_leave_story_step_with_short_story(self, manager):
        manager.session.story = "Too short."
        with pytest.raises(WizardError):
            WizardService(manager).next()
        assert manager.session.current_step == WizardStep.WRITE_STORY

    def test_next_stops_at_last_step(self, manager):
        manager.session.story = STORY
        wizard = WizardService(manager)
        steps = [wizard.next() for _ in range(4)]
        assert steps == [
            WizardStep.DEFINE_CHARACTERS,
            WizardStep.CHOOSE_STYLE,
            WizardStep.GENERATE_COMIC,
            WizardStep.GENERATE_COMIC,
        ]

    def test_back_stops_at_first_step(self, manager):
        wizard = WizardService(manager)
        assert wizard.back() == WizardStep.WRITE_STORY

    def test_go_to_only_reached_steps(self, manager):
        manager.session.current_step = WizardStep.CHOOSE_STYLE
        wizard = WizardService(manager)

        assert wizard.go_to(1) == WizardStep.WRITE_STORY
        with pytest.raises(WizardError):
            wizard.go_to(2)
        with pytest.raises(ValidationError):
            wizard.go_to(7)

    def test_regenerate_clears_panels(self, manager):
        session = manager.session
        session.panels = [ComicPanel(panel_number=1, generated_image=PLACEHOLDER_IMAGE_URL)]
        session.current_step = WizardStep.GENERATE_COMIC

        assert WizardService(manager).regenerate() == WizardStep.CHOOSE_STYLE
        assert session.panels == []

    def test_regenerate_waits_for_generation(self, manager):
        session = manager.session
        session.panels = [ComicPanel(panel_number=1, generated_image=PLACEHOLDER_IMAGE_URL)]
        session.current_step = WizardStep.GENERATE_COMIC
        session.generating = True

        with pytest.raises(WizardError):
            WizardService(manager).regenerate()
        assert len(session.panels) == 1
        assert session.current_step == WizardStep.GENERATE_COMIC


class TestStory:
    def test_long_story_extracts_new_characters(self, manager, fake_client):
        fake_client.structured["ExtractedCharacters"] = {"characters": ["Mira", "teo", "Ola"]}
        CharacterService(manager).create_character("Teo")

        added = asyncio.run(StoryService(manager).set_story(STORY))

        assert [c.name for c in added] == ["Mira", "Ola"]
        assert [c.name for c in manager.session.characters] == ["Teo", "Mira", "Ola"]
        assert all(c.photos == [] for c in added)

    def test_short_story_skips_extraction(self, manager, fake_client):
        asyncio.run(StoryService(manager).set_story("Mira sat."))
        assert fake_client.structured_calls == []
        assert manager.session.story == "Mira sat."

    def test_story_of_exactly_min_length_skips_extraction(self, manager, fake_client):
        asyncio.run(StoryService(manager).set_story("x" * 100))
        assert fake_client.structured_calls == []

    def test_too_long_story_rejected(self, manager, fake_client):
        with pytest.raises(ValidationError):
            asyncio.run(StoryService(manager).set_story("x" * 10001))
        assert manager.session.story == ""


class TestCharacters:
    def test_blank_name_rejected(self, manager):
        with pytest.raises(ValidationError):
            CharacterService(manager).create_character("   ")

    def test_names_are_trimmed(self, manager):
        char = CharacterService(manager).create_character("  Mira ")
        assert char.name == "Mira"

    def test_photos_upload_and_remove(self, manager):
        service = CharacterService(manager)
        char = service.create_character("Mira")

        photos = service.add_photos(char.id, [(b"a", "image/png"), (b"b", "image/jpeg")])

        assert [p.data for p in char.photos] == [b"a", b"b"]
        assert photos[0].url.startswith("data:image/png;base64,")
        assert service.remove_photo(char.id, photos[0].id)
        assert [p.data for p in char.photos] == [b"b"]

    def test_non_image_upload_rejected(self, manager):
        service = CharacterService(manager)
        char = service.create_character("Mira")
        with pytest.raises(ValidationError):
            service.add_photos(char.id, [(b"%PDF", "application/pdf")])
        assert char.photos == []

    def test_generated_image_has_no_raw_file(self, manager, fake_client):
        service = CharacterService(manager)
        char = service.create_character("Mira")

        photo = asyncio.run(service.generate_image(char.id, "tall"))

        assert char.photos == [photo]
        assert not photo.has_file
        assert photo.url.startswith("data:image/png;base64,")

    def test_delete_unknown(self, manager):
        assert not CharacterService(manager).delete_character("nope")


class TestStyle:
    def test_update_single_axis(self, manager):
        style = StyleService(manager).update_style(border=BorderStyle.ROUNDED)
        assert style.border == BorderStyle.ROUNDED
        assert style.style == ComicStyleName.COMIC_BOOK

    def test_options(self):
        options = style_options()
        assert "Manga" in options["style"]
        assert "No Borders" in options["border"]


class TestComic:
    def ready(self, manager):
        manager.session.story = STORY
        CharacterService(manager).create_character("Mira")

    def test_requires_story_and_characters(self, manager, fake_client):
        service = ComicService(manager, panel_delay=0)
        with pytest.raises(ValidationError):
            asyncio.run(service.generate())

        manager.session.story = STORY
        with pytest.raises(ValidationError):
            asyncio.run(service.generate())

    def test_generate_moves_to_preview(self, manager, fake_client):
        self.ready(manager)
        fake_client.script({"panel_number": 1}, {"panel_number": 2})

        panels = asyncio.run(ComicService(manager, panel_delay=0).generate())

        assert len(panels) == 2
        assert manager.session.panels == panels
        assert manager.session.current_step == WizardStep.GENERATE_COMIC
        assert manager.session.progress.current == 2
        assert manager.session.progress.total == 2

    def test_unexpected_error_is_friendly(self, manager, fake_client, monkeypatch):
        self.ready(manager)

        async def explode(*args, **kwargs):
            raise KeyError("boom")

        monkeypatch.setattr("comicgenius_generators.comic.ComicGenerator.generate_panels", explode)

        with pytest.raises(GenerationError, match="Failed to generate comic. Please try again."):
            asyncio.run(ComicService(manager, panel_delay=0).generate())

    def test_second_generation_is_rejected_while_running(self, manager, fake_client):
        self.ready(manager)
        fake_client.script({"panel_number": 1}, {"panel_number": 2})

        async def both():
            return await asyncio.gather(
                ComicService(manager, panel_delay=0.01).generate(),
                ComicService(manager, panel_delay=0.01).generate(),
                return_exceptions=True,
            )

        first, second = asyncio.run(both())

        assert len(first) == 2
        assert isinstance(second, WizardError)
        assert len(fake_client.image_calls) == 2
        assert not manager.session.generating

    def test_failed_generation_can_be_retried(self, manager, fake_client, monkeypatch):
        self.ready(manager)
        fake_client.script({"panel_number": 1})

        async def explode(*args, **kwargs):
            raise KeyError("boom")

        with monkeypatch.context() as patched:
            patched.setattr("comicgenius_generators.comic.ComicGenerator.generate_panels", explode)
            with pytest.raises(GenerationError):
                asyncio.run(ComicService(manager, panel_delay=0).generate())
        assert not manager.session.generating

        assert len(asyncio.run(ComicService(manager, panel_delay=0).generate())) == 1


class TestVideo:
    def test_stores_video_on_session(self, manager, fake_client):
        manager.session.panels = [ComicPanel(panel_number=1, generated_image=png_data_url())]

        video = asyncio.run(VideoService(manager, poll_interval=0).generate(1))

        assert VideoService(manager).get_video(1) is video

    def test_placeholder_panel_rejected(self, manager, fake_client):
        manager.session.panels = [ComicPanel(panel_number=1, generated_image=PLACEHOLDER_IMAGE_URL)]
        with pytest.raises(ValidationError):
            asyncio.run(VideoService(manager).generate(1))
        assert fake_client.video_calls == []

    def test_missing_panel(self, manager, fake_client):
        with pytest.raises(NotFoundError):
            asyncio.run(VideoService(manager).generate(3))


class TestExport:
    def test_requires_panels(self, manager):
        with pytest.raises(ValidationError):
            ExportService(manager).export_pdf()

    def test_exports_pdf(self, manager):
        manager.session.panels = [ComicPanel(panel_number=1, generated_image=png_data_url())]
        assert ExportService(manager).export_pdf().startswith(b"%PDF")


class TestJobs:
    def test_failed_job_records_error(self):
        service = JobService()
        job = service.create_job("comic_generation", metadata={"session_id": "s1"})

        async def fail():
            raise GenerationError("Failed to generate comic. Please try again.")

        asyncio.run(service.run_job(job, fail()))

        assert job.status == JobStatus.FAILED
        assert job.error == "Failed to generate comic. Please try again."
        assert service.list_jobs(session_id="s1")[1] == 1
        assert service.list_jobs(session_id="other")[1] == 0

    def test_cannot_cancel_finished_job(self):
        service = JobService()
        job = service.create_job("video_generation")

        async def ok():
            return {"panel_number": 1}

        asyncio.run(service.run_job(job, ok()))

        assert job.result == {"panel_number": 1}
        assert not service.cancel_job(job.id)

    def test_creating_a_job_forgets_old_finished_jobs(self):
        service = JobService()
        stale = service.create_job("comic_generation")
        stale.status = JobStatus.COMPLETED
        stale.completed_at = datetime.now() - timedelta(hours=25)
        recent = service.create_job("video_generation")
        recent.status = JobStatus.FAILED
        recent.completed_at = datetime.now() - timedelta(hours=1)
        running = service.create_job("comic_generation")

        fresh = service.create_job("video_generation")

        assert service.get_job(stale.id) is None
        assert service.get_job(recent.id) is recent
        assert service.get_job(running.id) is running
        assert service.get_job(fresh.id) is fresh

    def test_active_job_lookup(self):
        service = JobService()
        job = service.create_job("comic_generation", metadata={"session_id": "s1"})

        assert service.has_active_job("comic_generation", "s1")
        assert not service.has_active_job("comic_generation", "s2")
        assert not service.has_active_job("video_generation", "s1")

        job.status = JobStatus.COMPLETED
        assert not service.has_active_job("comic_generation", "s1")
