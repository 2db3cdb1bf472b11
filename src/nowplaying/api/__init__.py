"""HTTP client for the remote player control API."""

from nowplaying.api.album_art import AlbumArt, cache_busting_url
from nowplaying.api.client import (
    PlayerApiClient,
    PlayerApiError,
    PlayerConnectionError,
    PlayerProtocolError,
)

__all__ = [
    "AlbumArt",
    "PlayerApiClient",
    "PlayerApiError",
    "PlayerConnectionError",
    "PlayerProtocolError",
    "cache_busting_url",
]
