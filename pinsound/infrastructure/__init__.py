"""Vendor clients (Spotify, Google Vision, Gemini, Pinterest)."""

from .spotify import SpotifyToken, SpotifyTokenProvider, CatalogService
from .vision import VisionClient
from .gemini import GenerationClient
from .pinterest import PinterestClient

__all__ = [
    "SpotifyToken",
    "SpotifyTokenProvider",
    "CatalogService",
    "VisionClient",
    "GenerationClient",
    "PinterestClient",
]
