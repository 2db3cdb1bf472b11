"""Album art display widget.

The view follows a source URL. Setting an empty source clears the art.
Each source gets a sequence number, and downloaded bytes replace the image
only when their URL is newer than the one on screen, so a slow download
still lands while an older one cannot overwrite a newer image.
"""

import logging

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QPixmap, QResizeEvent
from PySide6.QtWidgets import QLabel, QSizePolicy, QWidget

logger = logging.getLogger(__name__)

ALBUM_ART_SIZE = 240

PLACEHOLDER_TEXT = "No\nArt"

# Maximum accepted image size in bytes
MAX_ART_BYTES = 10 * 1024 * 1024

# Sources remembered while their downloads are outstanding
MAX_PENDING_SOURCES = 32


class AlbumArtView(QLabel):
    """Square album art region driven by an art source URL.

    Example:
        view = AlbumArtView()
        view.set_source("http://host/album-art?1700000000000")
        view.set_art("http://host/album-art?1700000000000", data, "image/png")
    """

    def __init__(self, parent: QWidget | None = None) -> None:
        """Initialize the view with the placeholder shown."""
        super().__init__(parent)
        self._source = ""
        self._original_pixmap: QPixmap | None = None

        # Sources in the order they were set; art is accepted for any of them
        # that is newer than what is shown
        self._sequence = 0
        self._shown_sequence = 0
        self._pending: dict[str, int] = {}

        self.setMinimumSize(ALBUM_ART_SIZE, ALBUM_ART_SIZE)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._show_placeholder()

    @property
    def source(self) -> str:
        """Return the current art URL, or "" when cleared."""
        return self._source

    @property
    def has_art(self) -> bool:
        """Return True if an image is displayed."""
        return self._original_pixmap is not None and not self._original_pixmap.isNull()

    @Slot(str)
    def set_source(self, url: str) -> None:
        """Point the view at a new art URL, or clear it with "".

        The previous image stays visible until art for the new URL (or for
        any source set after the one on screen) arrives.
        """
        self._source = url
        if not url:
            self._pending.clear()
            self._show_placeholder()
            return
        self._sequence += 1
        self._pending.pop(url, None)
        self._pending[url] = self._sequence
        while len(self._pending) > MAX_PENDING_SOURCES:
            del self._pending[next(iter(self._pending))]

    def set_art(self, url: str, data: bytes, mime_type: str) -> None:
        """Apply downloaded image bytes for a URL.

        Bytes are applied when the URL was set as a source after the image on
        screen and the view has not been cleared since. A download that is
        slower than the poll interval therefore still shows up, while one
        that finishes after a newer image is dropped.

        Args:
            url: URL the bytes were downloaded from.
            data: Raw image bytes, empty if the download failed.
            mime_type: MIME type reported by the server.
        """
        sequence = self._pending.get(url)
        if not self._source or sequence is None or sequence <= self._shown_sequence:
            logger.debug("Ignoring stale album art for %s", url)
            return
        if not data and url != self._source:
            logger.debug("Ignoring failed download for superseded %s", url)
            return

        self._shown_sequence = sequence
        self._pending = {key: seq for key, seq in self._pending.items() if seq > sequence}

        if not data:
            self._show_placeholder()
            return
        if len(data) > MAX_ART_BYTES:
            logger.warning("Album art too large (%d bytes), ignoring", len(data))
            self._show_placeholder()
            return

        pixmap = QPixmap()
        fmt = mime_type.rsplit("/", 1)[-1].upper() if mime_type else None
        if not pixmap.loadFromData(data, fmt) and not pixmap.loadFromData(data):
            logger.debug("Could not decode album art (%s, %d bytes)", mime_type, len(data))
            self._show_placeholder()
            return
        self._set_pixmap(pixmap)

    def clear_art(self) -> None:
        """Forget the source and show the placeholder."""
        self.set_source("")

    def _show_placeholder(self) -> None:
        """Show the 'No Art' placeholder."""
        self._original_pixmap = None
        self.clear()
        self.setText(PLACEHOLDER_TEXT)

    def _set_pixmap(self, pixmap: QPixmap) -> None:
        self._original_pixmap = pixmap
        self._update_scaled_pixmap()

    def _update_scaled_pixmap(self) -> None:
        """Scale pixmap to fit the label while preserving aspect ratio."""
        if not self.has_art:
            return
        assert self._original_pixmap is not None
        scaled = self._original_pixmap.scaled(
            self.width(),
            self.height(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.setPixmap(scaled)

    def resizeEvent(self, event: QResizeEvent) -> None:  # noqa: N802
        """Rescale the art on resize."""
        super().resizeEvent(event)
        self._update_scaled_pixmap()
