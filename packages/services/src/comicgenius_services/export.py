"""Comic export service."""

from typing import Optional

from comicgenius_export import PDFOptions, generate_comic_pdf
from comicgenius_core_schemas import ValidationError
from comicgenius_storage import SessionManager


class ExportService:
    """Exports a session's panels."""

    def __init__(self, manager: SessionManager):
        """Initialize service with a session manager."""
        self.manager = manager

    def export_pdf(self, options: Optional[PDFOptions] = None) -> bytes:
        """Render the session's panels to PDF.

        Raises:
            ValidationError: If no panels have been generated
        """
        panels = self.manager.session.panels
        if not panels:
            raise ValidationError("Generate a comic before exporting", field="panels")
        return generate_comic_pdf(panels, options)
