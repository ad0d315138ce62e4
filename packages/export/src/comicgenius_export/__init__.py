"""Document export for ComicGenius."""

from comicgenius_export.pdf import PDFOptions, comic_pdf_filename, generate_comic_pdf

__all__ = ["PDFOptions", "comic_pdf_filename", "generate_comic_pdf"]
