"""Configuration manager using QSettings for persistent storage."""

import logging

from PySide6.QtCore import QByteArray, QSettings

logger = logging.getLogger(__name__)

# Settings keys
_KEY_SERVER_URL = "server/url"
_KEY_POLL_INTERVAL_MS = "polling/interval_ms"
_KEY_HTTP_TIMEOUT = "http/timeout"
_KEY_WINDOW_GEOMETRY = "window/geometry"

DEFAULT_SERVER_URL = "http://127.0.0.1:8080"
DEFAULT_POLL_INTERVAL_MS = 1000
DEFAULT_HTTP_TIMEOUT = 5

_MIN_POLL_INTERVAL_MS = 100
_MAX_POLL_INTERVAL_MS = 60000
_MIN_HTTP_TIMEOUT = 1
_MAX_HTTP_TIMEOUT = 60


def clamp_poll_interval(interval_ms: int) -> int:
    """Clamp a poll interval to the supported range in milliseconds."""
    return max(_MIN_POLL_INTERVAL_MS, min(_MAX_POLL_INTERVAL_MS, interval_ms))


def clamp_http_timeout(seconds: int) -> int:
    """Clamp an HTTP timeout to the supported range in seconds."""
    return max(_MIN_HTTP_TIMEOUT, min(_MAX_HTTP_TIMEOUT, seconds))


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\NowPlaying\\NowPlaying
    - macOS: ~/Library/Preferences/com.NowPlaying.NowPlaying.plist
    - Linux: ~/.config/NowPlaying/NowPlaying.conf

    Example:
        config = ConfigManager()
        url = config.get_server_url()
        config.set_poll_interval_ms(500)
    """

    def __init__(self, organization: str = "NowPlaying", application: str = "NowPlaying") -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- Server settings -------------------------------------------------------

    def get_server_url(self) -> str:
        """Return the player server base URL.

        Returns:
            URL string (default "http://127.0.0.1:8080").
        """
        value = self._settings.value(_KEY_SERVER_URL, DEFAULT_SERVER_URL, str)
        return str(value).rstrip("/") if value else DEFAULT_SERVER_URL

    def set_server_url(self, url: str) -> None:
        """Set the player server base URL.

        Args:
            url: Base URL, e.g. "http://192.168.1.50:8080".
        """
        self._settings.setValue(_KEY_SERVER_URL, url.rstrip("/"))

    # -- Polling settings ------------------------------------------------------

    def get_poll_interval_ms(self) -> int:
        """Return the state poll interval.

        Returns:
            Interval in milliseconds (default 1000).
        """
        value = self._settings.value(_KEY_POLL_INTERVAL_MS, DEFAULT_POLL_INTERVAL_MS, int)
        try:
            return clamp_poll_interval(int(value))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            logger.warning("Invalid poll interval in settings: %r", value)
            return DEFAULT_POLL_INTERVAL_MS

    def set_poll_interval_ms(self, interval_ms: int) -> None:
        """Set the state poll interval.

        Args:
            interval_ms: Interval in milliseconds (100-60000).
        """
        self._settings.setValue(_KEY_POLL_INTERVAL_MS, clamp_poll_interval(interval_ms))

    # -- HTTP settings ---------------------------------------------------------

    def get_http_timeout(self) -> int:
        """Return the HTTP request timeout.

        Returns:
            Timeout in seconds (default 5).
        """
        value = self._settings.value(_KEY_HTTP_TIMEOUT, DEFAULT_HTTP_TIMEOUT, int)
        try:
            return clamp_http_timeout(int(value))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            logger.warning("Invalid HTTP timeout in settings: %r", value)
            return DEFAULT_HTTP_TIMEOUT

    def set_http_timeout(self, seconds: int) -> None:
        """Set the HTTP request timeout.

        Args:
            seconds: Timeout in seconds (1-60).
        """
        self._settings.setValue(_KEY_HTTP_TIMEOUT, clamp_http_timeout(seconds))

    # -- Window settings -------------------------------------------------------

    def get_window_geometry(self) -> QByteArray | None:
        """Return the saved window geometry, or None if never saved."""
        value = self._settings.value(_KEY_WINDOW_GEOMETRY)
        return value if isinstance(value, QByteArray) else None

    def set_window_geometry(self, geometry: QByteArray) -> None:
        """Save the window geometry.

        Args:
            geometry: Result of QWidget.saveGeometry().
        """
        self._settings.setValue(_KEY_WINDOW_GEOMETRY, geometry)

    # -- General settings ------------------------------------------------------

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
