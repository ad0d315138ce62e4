"""ComicGenius HTTP API."""
