"""Async HTTP client for the remote player control API.

Endpoints:
    GET /api/control?action=<play|pause>   response ignored
    GET /api/state                         JSON PlaybackState
    GET /album-art?<timestamp>             image bytes

Requests use urllib in the default executor so the event loop never blocks.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from nowplaying.api.album_art import DEFAULT_MIME_TYPE, AlbumArt, cache_busting_url
from nowplaying.models.playback_state import PlaybackState

logger = logging.getLogger(__name__)

CONTROL_PATH = "/api/control"
STATE_PATH = "/api/state"

USER_AGENT = "NowPlaying/1.0"

# Request timeout in seconds
DEFAULT_TIMEOUT = 5.0


class PlayerApiError(Exception):
    """Base error for player API calls.

    Attributes:
        status: HTTP status code, or None if the request never got a response.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class PlayerConnectionError(PlayerApiError):
    """The server could not be reached or the request timed out."""


class PlayerProtocolError(PlayerApiError):
    """The server answered with a body that is not a valid state object."""


class PlayerApiClient:
    """Client for the player's HTTP control API.

    Example:
        api = PlayerApiClient("http://192.168.1.50:8080")
        await api.control("play")
        state = await api.get_state()
        if state.has_picture:
            art = await api.get_album_art(api.album_art_url())
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        """Initialize the client.

        Args:
            base_url: Server base URL, e.g. "http://host:8080".
            timeout: Per-request timeout in seconds.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        """Return the server base URL."""
        return self._base_url

    @property
    def timeout(self) -> float:
        """Return the request timeout in seconds."""
        return self._timeout

    def control_url(self, action: str) -> str:
        """Return the control endpoint URL for an action."""
        query = urllib.parse.urlencode({"action": action})
        return f"{self._base_url}{CONTROL_PATH}?{query}"

    def state_url(self) -> str:
        """Return the state endpoint URL."""
        return f"{self._base_url}{STATE_PATH}"

    def album_art_url(self, timestamp_ms: int | None = None) -> str:
        """Return a cache-busted album art URL."""
        return cache_busting_url(self._base_url, timestamp_ms)

    async def control(self, action: str) -> None:
        """Send a control action ("play", "pause", ...).

        Args:
            action: Action name passed through to the server.

        Raises:
            PlayerApiError: If the request fails.
        """
        url = self.control_url(action)
        logger.debug("Control request: %s", url)
        await self._request(url)

    async def get_state(self) -> PlaybackState:
        """Fetch and parse the current playback state.

        Returns:
            Parsed PlaybackState.

        Raises:
            PlayerConnectionError: If the server is unreachable.
            PlayerProtocolError: If the body is not a JSON object.
            PlayerApiError: On HTTP error status.
        """
        body, _ = await self._request(self.state_url())
        return PlaybackState.from_dict(_decode_object(body))

    async def get_album_art(self, url: str) -> AlbumArt:
        """Download album art from a URL built by album_art_url().

        Args:
            url: Album art URL.

        Returns:
            AlbumArt with the response bytes and content type.

        Raises:
            PlayerApiError: If the request fails.
        """
        data, content_type = await self._request(url)
        return AlbumArt(data=data, mime_type=content_type or DEFAULT_MIME_TYPE, url=url)

    async def _request(self, url: str) -> tuple[bytes, str]:
        """Run a blocking GET in the default executor."""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self._fetch, url)

    def _fetch(self, url: str) -> tuple[bytes, str]:
        """Fetch a URL (blocking).

        Args:
            url: URL to fetch.

        Returns:
            Tuple of (body bytes, content type without parameters).
        """
        req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as response:
                content_type = response.headers.get("Content-Type", "")
                return response.read(), content_type.split(";", 1)[0].strip()
        except urllib.error.HTTPError as e:
            raise PlayerApiError(f"HTTP {e.code} from {url}", status=e.code) from e
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            raise PlayerConnectionError(f"Cannot reach {url}: {e}") from e


def _decode_object(body: bytes) -> dict[str, Any]:
    """Decode a JSON object body."""
    try:
        data = json.loads(body.decode())
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PlayerProtocolError(f"Invalid JSON in state response: {e}") from e
    if not isinstance(data, dict):
        raise PlayerProtocolError(f"Expected JSON object, got {type(data).__name__}")
    return data
