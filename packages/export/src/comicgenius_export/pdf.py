"""PDF export of finished comics."""

import io
import logging
import re
from dataclasses import dataclass
from typing import Optional

from fpdf import FPDF
from PIL import Image, UnidentifiedImageError

from comicgenius_gemini_client import decode_data_url
from comicgenius_core_schemas import ComicPanel

logger = logging.getLogger(__name__)

# A4 portrait, millimetres
PAGE_WIDTH = 210
PAGE_HEIGHT = 297
MARGIN = 20
CONTENT_WIDTH = PAGE_WIDTH - MARGIN * 2
CONTENT_HEIGHT = PAGE_HEIGHT - MARGIN * 2

FONT = "Helvetica"
GREY = (100, 100, 100)
LIGHT_GREY = (150, 150, 150)
BLACK = (0, 0, 0)

DEFAULT_FILENAME = "comic-craft-comic.pdf"

# Core PDF fonts only cover latin-1
_TEXT_REPLACEMENTS = {
    "\u2014": "-",
    "\u2013": "-",
    "\u2018": "'",
    "\u2019": "'",
    "\u201c": '"',
    "\u201d": '"',
    "\u2026": "...",
    "\u2022": "*",
    "\u00a0": " ",
}


@dataclass
class PDFOptions:
    """Layout options for the exported document."""

    title: str = "Comic Craft Comic"
    author: str = "Comic Craft"
    include_page_numbers: bool = True
    include_title_page: bool = True


def sanitize_text(text: str) -> str:
    """Fold text into the latin-1 range the core fonts can draw."""
    for unicode_char, ascii_char in _TEXT_REPLACEMENTS.items():
        text = text.replace(unicode_char, ascii_char)
    return text.encode("latin-1", "replace").decode("latin-1")


def comic_pdf_filename(title: Optional[str] = None) -> str:
    """Build a download filename from the comic title."""
    if not title:
        return DEFAULT_FILENAME
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return f"{slug}.pdf" if slug else DEFAULT_FILENAME


def fit_image(width: float, height: float, max_width: float, max_height: float) -> tuple[float, float]:
    """Scale (width, height) down to fit the box, keeping the aspect ratio."""
    if width > max_width:
        scale = max_width / width
        width = max_width
        height = height * scale

    if height > max_height:
        scale = max_height / height
        height = max_height
        width = width * scale

    return width, height


class ComicPDF(FPDF):
    """FPDF document that knows how to lay out comic pages."""

    def __init__(self, options: PDFOptions):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.options = options
        self.set_auto_page_break(auto=False)
        self.set_title(sanitize_text(options.title))
        self.set_author(sanitize_text(options.author))

    def centered_text(self, y: float, text: str) -> None:
        text = sanitize_text(text)
        self.text((PAGE_WIDTH - self.get_string_width(text)) / 2, y, text)

    def add_title_page(self) -> None:
        self.add_page()

        self.set_font(FONT, "B", 32)
        self.centered_text(PAGE_HEIGHT / 2 - 20, self.options.title)

        self.set_font(FONT, "", 18)
        self.centered_text(PAGE_HEIGHT / 2 + 10, f"by {self.options.author}")

        self.set_font(FONT, "", 12)
        self.set_text_color(*GREY)
        self.centered_text(PAGE_HEIGHT - 50, "Generated with Comic Craft")
        self.set_text_color(*BLACK)

    def add_page_number(self) -> None:
        label = f"Page {self.page_no()}"
        self.set_font(FONT, "", 10)
        self.set_text_color(*GREY)
        self.text(PAGE_WIDTH - MARGIN - self.get_string_width(label), PAGE_HEIGHT - 10, label)
        self.set_text_color(*BLACK)

    def add_panel_page(self, panel: ComicPanel) -> None:
        self.add_page()

        if self.options.include_page_numbers:
            self.add_page_number()

        self.set_font(FONT, "B", 14)
        self.text(MARGIN, MARGIN + 10, f"Panel {panel.panel_number}")

        if panel.narration:
            self.set_font(FONT, "", 12)
            self.set_xy(MARGIN, MARGIN + 20)
            self.multi_cell(CONTENT_WIDTH, 6, sanitize_text(panel.narration))

        dialogue_y = MARGIN + 50
        for character in panel.characters:
            if not character.dialogue:
                continue

            self.set_font(FONT, "B", 11)
            self.set_xy(MARGIN, dialogue_y)
            self.cell(20, 5, sanitize_text(f"{character.name}:"))

            self.set_font(FONT, "", 11)
            self.set_xy(MARGIN + 20, dialogue_y)
            self.multi_cell(CONTENT_WIDTH - 30, 5, sanitize_text(character.dialogue))
            dialogue_y = self.get_y() + 5

        if panel.generated_image:
            self.add_panel_image(panel)

    def add_panel_image(self, panel: ComicPanel) -> None:
        try:
            data, _ = decode_data_url(panel.generated_image)
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                width, height = fit_image(
                    img.width,
                    img.height,
                    CONTENT_WIDTH,
                    CONTENT_HEIGHT - 100,
                )
                x = MARGIN + (CONTENT_WIDTH - width) / 2
                self.image(img.convert("RGB"), x=x, y=MARGIN + 80, w=width, h=height)
        except (ValueError, UnidentifiedImageError, OSError) as e:
            logger.error("Error adding image for panel %s to PDF: %s", panel.panel_number, e)
            self.set_font(FONT, "I", 10)
            self.set_text_color(*LIGHT_GREY)
            self.text(MARGIN, MARGIN + 80, "Image could not be loaded")
            self.set_text_color(*BLACK)


def generate_comic_pdf(
    panels: list[ComicPanel],
    options: Optional[PDFOptions] = None,
) -> bytes:
    """Render panels into a PDF document.

    The document has an optional title page followed by one page per
    panel carrying the panel number, narration, dialogue and image.

    Returns:
        The PDF file contents
    """
    options = options or PDFOptions()
    pdf = ComicPDF(options)

    if options.include_title_page:
        pdf.add_title_page()

    for panel in panels:
        pdf.add_panel_page(panel)

    return bytes(pdf.output())
