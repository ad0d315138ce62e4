"""Google Gemini API client wrapper for ComicGenius."""

from comicgenius_gemini_client.client import GeminiClient, get_client, set_client
from comicgenius_gemini_client.images import (
    decode_data_url,
    detect_aspect_ratio,
    encode_data_url,
)

__all__ = [
    "GeminiClient",
    "get_client",
    "set_client",
    "decode_data_url",
    "detect_aspect_ratio",
    "encode_data_url",
]
