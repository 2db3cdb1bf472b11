"""Album art data and URL helpers.

The player serves the current track's artwork at a fixed path. Browsers
and HTTP caches would keep showing the previous track's image, so every
request carries a throwaway timestamp query.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

ALBUM_ART_PATH = "/album-art"

DEFAULT_MIME_TYPE = "image/jpeg"


@dataclass(frozen=True)
class AlbumArt:
    """Album art downloaded from the player.

    Attributes:
        data: Raw image bytes.
        mime_type: MIME type (e.g., "image/jpeg").
        url: URL the image was fetched from.
    """

    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE
    url: str = ""

    @property
    def is_valid(self) -> bool:
        """Check if this album art has valid data."""
        return len(self.data) > 0


def cache_busting_url(base_url: str, timestamp_ms: int | None = None) -> str:
    """Return the album art URL with a cache-busting query.

    Args:
        base_url: Server base URL without trailing slash.
        timestamp_ms: Epoch milliseconds; defaults to now.

    Returns:
        URL of the form ``<base>/album-art?<timestamp_ms>``.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{base_url}{ALBUM_ART_PATH}?{timestamp_ms}"
