"""Main application window.

Layout:
+----------------------+
|      Album art       |
|                      |
|   Title - Artist     |
|        [ ▶ ]         |
+----------------------+
"""

import logging

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QLabel, QMainWindow, QPushButton, QVBoxLayout, QWidget

from nowplaying.core.config import ConfigManager
from nowplaying.core.state_client import PAUSED_LABEL, PlayerStateClient
from nowplaying.models.playback_state import PlaybackState
from nowplaying.ui.widgets.album_art import AlbumArtView

logger = logging.getLogger(__name__)

WINDOW_TITLE = "NowPlaying"
CONTROL_BUTTON_SIZE = 48


class PlayerWindow(QMainWindow):
    """Window with album art and a play/pause button.

    The window does not talk to the server. It renders what a
    PlayerStateClient emits and reports button clicks via toggle_requested.

    Example:
        window = PlayerWindow(config=ConfigManager())
        window.bind_client(client)
        window.show()
    """

    toggle_requested = Signal()

    def __init__(self, config: ConfigManager | None = None) -> None:
        """Initialize the window.

        Args:
            config: Optional config used to restore and save geometry.
        """
        super().__init__()
        self._config = config
        self.setWindowTitle(WINDOW_TITLE)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        self._art_view = AlbumArtView()
        layout.addWidget(self._art_view, 1)

        self._track_label = QLabel()
        self._track_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._track_label)

        self._play_pause_button = QPushButton(PAUSED_LABEL)
        self._play_pause_button.setFixedSize(CONTROL_BUTTON_SIZE, CONTROL_BUTTON_SIZE)
        self._play_pause_button.setToolTip("Play / Pause")
        self._play_pause_button.clicked.connect(self.toggle_requested)
        layout.addWidget(self._play_pause_button, 0, Qt.AlignmentFlag.AlignHCenter)

        self.setCentralWidget(central)
        self._restore_geometry()

    @property
    def art_view(self) -> AlbumArtView:
        """Return the album art view."""
        return self._art_view

    @property
    def play_pause_button(self) -> QPushButton:
        """Return the play/pause button."""
        return self._play_pause_button

    @property
    def track_label(self) -> QLabel:
        """Return the track info label."""
        return self._track_label

    def bind_client(self, client: PlayerStateClient) -> None:
        """Connect a state client's signals to this window and back."""
        client.art_source_changed.connect(self._art_view.set_source)
        client.art_loaded.connect(self._art_view.set_art)
        client.label_changed.connect(self.set_play_pause_label)
        client.state_received.connect(self.set_playback_state)
        self.toggle_requested.connect(client.toggle)

    @Slot(str)
    def set_play_pause_label(self, label: str) -> None:
        """Set the play/pause button glyph."""
        self._play_pause_button.setText(label)

    @Slot(object)
    def set_playback_state(self, state: PlaybackState) -> None:
        """Show the current track's title and artist."""
        song = state.current_song
        self._track_label.setText(song.display_text if song else "")

    def _restore_geometry(self) -> None:
        if self._config is None:
            self.resize(320, 400)
            return
        geometry = self._config.get_window_geometry()
        if geometry is None or not self.restoreGeometry(geometry):
            self.resize(320, 400)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        """Save geometry on close."""
        if self._config is not None:
            self._config.set_window_geometry(self.saveGeometry())
        super().closeEvent(event)
