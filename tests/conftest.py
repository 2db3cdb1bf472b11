"""Test fixtures for nowplaying tests."""

import itertools
import json
import os
import threading
from collections.abc import Generator
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from PySide6.QtCore import QBuffer, QIODevice
from PySide6.QtGui import QColor, QImage

# Widgets need a platform plugin; CI machines have no display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from nowplaying.api.album_art import AlbumArt  # noqa: E402
from nowplaying.api.client import PlayerApiClient  # noqa: E402
from nowplaying.models.playback_state import PlaybackState  # noqa: E402

BASE_URL = "http://player.test"


def make_png(width: int = 4, height: int = 4) -> bytes:
    """Encode a solid-colour PNG image."""
    image = QImage(width, height, QImage.Format.Format_ARGB32)
    image.fill(QColor("red"))
    buffer = QBuffer()
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    image.save(buffer, "PNG")
    return bytes(buffer.data().data())


PNG_1X1 = make_png(1, 1)


def state_payload(is_playing: bool = False, picture: object = None, **song: Any) -> dict[str, Any]:
    """Build an /api/state JSON body."""
    payload: dict[str, Any] = {"isPlaying": is_playing}
    if picture is not None or song:
        payload["currentSong"] = {"picture": picture, **song}
    return payload


@pytest.fixture
def mock_api() -> MagicMock:
    """Return a PlayerApiClient mock with async endpoints.

    album_art_url() returns a distinct URL per call, like the real
    timestamp-based cache buster.
    """
    counter = itertools.count(1)
    api = MagicMock(spec=PlayerApiClient)
    api.base_url = BASE_URL
    api.timeout = 5.0
    api.get_state = AsyncMock(return_value=PlaybackState())
    api.control = AsyncMock(return_value=None)
    api.get_album_art = AsyncMock(
        side_effect=lambda url: AlbumArt(data=PNG_1X1, mime_type="image/png", url=url)
    )
    api.album_art_url = MagicMock(side_effect=lambda *_: f"{BASE_URL}/album-art?{next(counter)}")
    return api


@dataclass
class PlayerServerStub:
    """Mutable behaviour of the local HTTP player server."""

    host: str = ""
    port: int = 0
    state_body: bytes = b'{"isPlaying": false}'
    state_status: int = 200
    art_body: bytes = PNG_1X1
    art_content_type: str = "image/png"
    requests: list[str] = field(default_factory=list)

    @property
    def base_url(self) -> str:
        """Return the server base URL."""
        return f"http://{self.host}:{self.port}"

    def set_state(self, payload: dict[str, Any]) -> None:
        """Serve a JSON state payload."""
        self.state_body = json.dumps(payload).encode()


@pytest.fixture
def player_server() -> Generator[PlayerServerStub, None, None]:
    """Run a local HTTP server implementing the player API."""
    stub = PlayerServerStub()

    class Handler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802
            stub.requests.append(self.path)
            if self.path.startswith("/api/state"):
                self._reply(stub.state_status, stub.state_body, "application/json")
            elif self.path.startswith("/api/control"):
                self._reply(200, b"OK", "text/plain")
            elif self.path.startswith("/album-art"):
                self._reply(200, stub.art_body, stub.art_content_type)
            else:
                self._reply(404, b"Not found", "text/plain")

        def _reply(self, status: int, body: bytes, content_type: str) -> None:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    stub.host, stub.port = server.server_address[0], server.server_address[1]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield stub

    server.shutdown()
    server.server_close()
    thread.join(timeout=5.0)
