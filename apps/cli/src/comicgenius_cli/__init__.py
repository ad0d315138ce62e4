"""ComicGenius command-line interface."""

from .cli import app, configure_logging, main

__all__ = ["app", "configure_logging", "main"]
