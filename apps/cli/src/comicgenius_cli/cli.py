"""ComicGenius CLI - turn short stories into illustrated comics."""

import asyncio
import logging
import mimetypes
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from comicgenius_core_schemas import (
    PANEL_REQUEST_DELAY,
    VIDEO_POLL_INTERVAL,
    BorderStyle,
    ColorPalette,
    ComicStyleName,
    PanelCharacter,
    ServiceError,
)
from comicgenius_export import PDFOptions, comic_pdf_filename
from comicgenius_gemini_client import decode_data_url, encode_data_url
from comicgenius_generators import CharacterGenerator, VideoGenerator
from comicgenius_services import (
    CharacterService,
    ComicService,
    ExportService,
    SessionService,
    StoryService,
    StyleService,
)

app = typer.Typer(
    name="comicgenius",
    help="Turn short stories into illustrated comics",
    no_args_is_help=True,
)
console = Console()

LOG_FORMAT = "%(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send library logs through Rich."""
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def run_async(coro):
    """Run an async coroutine.

    Handles both standalone CLI usage and environments with existing event loops
    (Jupyter notebooks, IDEs, etc.) by using nest_asyncio when needed.
    """
    try:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is None:
            return asyncio.run(coro)
        else:
            # Event loop already running (Jupyter, IDE, etc.)
            import nest_asyncio
            nest_asyncio.apply()
            return loop.run_until_complete(coro)
    except ValueError as e:
        error_msg = str(e)
        if "GOOGLE_API_KEY" in error_msg:
            console.print("[red]Error: Missing API key[/red]")
            console.print(f"\n{error_msg}")
            console.print("\n[dim]Set your API key with:[/dim]")
            console.print('  export GOOGLE_API_KEY="your-api-key"')
            raise typer.Exit(1)
        raise
    except ServiceError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)


def read_story(path: Path) -> str:
    if not path.exists():
        console.print(f"[red]Story file not found: {path}[/red]")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def parse_pair(value: str) -> tuple[str, Optional[str]]:
    """Split "Name:rest" on the first colon; rest is None if absent."""
    name, sep, rest = value.partition(":")
    return name.strip(), (rest.strip() if sep else None)


def guess_mime_type(path: Path) -> str:
    return mimetypes.guess_type(path.name)[0] or "application/octet-stream"


def extension_for(mime_type: str) -> str:
    return mimetypes.guess_extension(mime_type) or ".png"


@app.callback()
def setup(
    log_level: str = typer.Option(
        os.environ.get("COMICGENIUS_LOG_LEVEL", "INFO"),
        "--log-level",
        help="Logging level",
    ),
):
    """Load .env and configure logging."""
    load_dotenv()
    configure_logging(log_level)


@app.command()
def extract(
    story_file: Path = typer.Argument(..., help="Text file containing the story"),
):
    """List the character names found in a story."""
    story = read_story(story_file)

    async def do_extract():
        return await CharacterGenerator().extract_characters(story)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task("Extracting characters...", total=None)
        names = run_async(do_extract())

    if not names:
        console.print("[yellow]No characters found.[/yellow]")
        return

    table = Table(title="Characters")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    for i, name in enumerate(names, start=1):
        table.add_row(str(i), name)
    console.print(table)


@app.command()
def create(
    story_file: Path = typer.Argument(..., help="Text file containing the story"),
    character: Optional[list[str]] = typer.Option(
        None,
        "--character",
        "-c",
        help='Character as "Name" or "Name:photo.png" (repeatable)',
    ),
    extract_names: bool = typer.Option(
        True,
        "--extract/--no-extract",
        help="Also tag characters extracted from the story",
    ),
    style: ComicStyleName = typer.Option(ComicStyleName.COMIC_BOOK, "--style", help="Art style"),
    palette: ColorPalette = typer.Option(ColorPalette.VIBRANT, "--palette", help="Color palette"),
    border: BorderStyle = typer.Option(BorderStyle.SHARP, "--border", help="Panel borders"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="PDF file to write"),
    images_dir: Optional[Path] = typer.Option(None, "--images-dir", help="Also save panel images here"),
    title: Optional[str] = typer.Option(None, "--title", help="Comic title"),
    author: Optional[str] = typer.Option(None, "--author", help="Comic author"),
    delay: float = typer.Option(
        float(os.environ.get("COMICGENIUS_PANEL_DELAY", PANEL_REQUEST_DELAY)),
        "--delay",
        help="Seconds between panel image requests",
    ),
):
    """Generate a comic from a story and export it as a PDF."""
    story = read_story(story_file)

    sessions = SessionService()
    manager = sessions.load(sessions.create().id)
    characters = CharacterService(manager)

    try:
        for value in character or []:
            name, photo = parse_pair(value)
            char = manager.session.get_character_by_name(name) or characters.create_character(name)
            if photo:
                photo_path = Path(photo)
                if not photo_path.exists():
                    console.print(f"[red]Photo not found: {photo_path}[/red]")
                    raise typer.Exit(1)
                characters.add_photos(
                    char.id, [(photo_path.read_bytes(), guess_mime_type(photo_path))]
                )

        run_async(StoryService(manager).set_story(story, extract=extract_names))
        StyleService(manager).update_style(style=style, palette=palette, border=border)
    except ServiceError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    session = manager.session
    console.print(Panel(
        f"[bold]{len(story)}[/bold] characters of story\n"
        f"Characters: {', '.join(c.name for c in session.characters) or '-'}\n"
        f"Style: {style.value} / {palette.value} / {border.value}",
        title="Comic",
        border_style="blue",
    ))

    service = ComicService(manager, panel_delay=delay)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Writing script and drawing panels...", total=None)

        def on_progress(current: int, total: int) -> None:
            progress.update(task, completed=current, total=total)

        panels = run_async(service.generate(on_progress=on_progress))

    if not panels:
        console.print("[red]No panels were generated. Please try again.[/red]")
        raise typer.Exit(1)

    failed = [p.panel_number for p in panels if not p.has_image_data]
    if failed:
        console.print(f"[yellow]Panels without an image: {', '.join(map(str, failed))}[/yellow]")

    if images_dir:
        images_dir.mkdir(parents=True, exist_ok=True)
        for panel in panels:
            if not panel.has_image_data:
                continue
            data, mime_type = decode_data_url(panel.generated_image)
            path = images_dir / f"panel-{panel.panel_number:02d}{extension_for(mime_type)}"
            path.write_bytes(data)
        console.print(f"[green]Panel images saved to {images_dir}[/green]")

    options = PDFOptions()
    if title:
        options.title = title
    if author:
        options.author = author

    output = output or Path(comic_pdf_filename(title))
    output.write_bytes(ExportService(manager).export_pdf(options))
    console.print(f"\n[green]Comic with {len(panels)} panel(s) saved: {output}[/green]")


@app.command("character-image")
def character_image(
    name: str = typer.Argument(..., help="Character name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Extra appearance details"),
    output: Path = typer.Option(..., "--output", "-o", help="Image file to write"),
):
    """Draw an anime-style portrait of a character."""
    async def do_generate():
        return await CharacterGenerator().generate_character_image(name, description)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task(f"Drawing {name}...", total=None)
        url = run_async(do_generate())

    data, _ = decode_data_url(url)
    output.write_bytes(data)
    console.print(f"[green]Portrait saved: {output}[/green]")


@app.command()
def animate(
    image: Path = typer.Argument(..., help="Panel image to animate"),
    narration: str = typer.Option("", "--narration", "-n", help="Narration to voice over"),
    dialogue: Optional[list[str]] = typer.Option(
        None,
        "--character",
        "-c",
        help='Dialogue as "Name:line" (repeatable)',
    ),
    output: Path = typer.Option(Path("comic-panel.mp4"), "--output", "-o", help="Video file to write"),
    poll_interval: float = typer.Option(
        float(os.environ.get("COMICGENIUS_VIDEO_POLL_INTERVAL", VIDEO_POLL_INTERVAL)),
        "--poll-interval",
        help="Seconds between status checks",
    ),
):
    """Animate a panel image into a short video with voiceover."""
    if not image.exists():
        console.print(f"[red]Image not found: {image}[/red]")
        raise typer.Exit(1)

    characters = []
    for value in dialogue or []:
        name, line = parse_pair(value)
        characters.append(PanelCharacter(name=name, dialogue=line or ""))

    panel_image = encode_data_url(image.read_bytes(), guess_mime_type(image))

    def on_progress(message: str) -> None:
        console.print(f"  [dim]{message}[/dim]")

    async def do_generate():
        generator = VideoGenerator(poll_interval=poll_interval)
        return await generator.generate_video(
            panel_image=panel_image,
            narration=narration,
            characters=characters,
            on_progress=on_progress,
        )

    video = run_async(do_generate())
    output.write_bytes(video.data)
    console.print(f"[green]Video ({video.aspect_ratio}) saved: {output}[/green]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
):
    """Start the ComicGenius API server."""
    import uvicorn

    console.print("\n[bold]ComicGenius API Server[/bold]")
    console.print(f"  URL: http://{host}:{port}")
    console.print(f"  Docs: http://{host}:{port}/docs")
    console.print()

    if reload:
        uvicorn.run("comicgenius_api.app:app", host=host, port=port, reload=True)
    else:
        from comicgenius_api.app import create_app

        uvicorn.run(create_app(), host=host, port=port, log_config=None)


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
