"""Main entry point for the NowPlaying application."""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QApplication

from nowplaying.api.client import PlayerApiClient
from nowplaying.core.config import ConfigManager, clamp_http_timeout, clamp_poll_interval
from nowplaying.core.state_client import PlayerStateClient
from nowplaying.ui.main_window import PlayerWindow

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

ICON_PATH = Path(__file__).parent / "resources" / "icon.svg"


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="nowplaying",
        description="NowPlaying - remote player control",
    )
    parser.add_argument(
        "url", nargs="?", default=None, help="player server base URL (e.g. http://host:8080)",
    )
    parser.add_argument(
        "--url", dest="url_flag", default=None, help="player server base URL",
    )
    parser.add_argument(
        "--interval", type=int, default=None, help="state poll interval in milliseconds",
    )
    parser.add_argument(
        "--timeout", type=int, default=None, help="HTTP request timeout in seconds",
    )
    parser.add_argument(
        "--debug", action="store_true", help="enable debug logging",
    )
    return parser


def configure_logging(debug: bool) -> None:
    """Configure root logging for the application."""
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT)


def initialize_application(app: QApplication) -> None:
    """Apply one-time startup settings.

    Best effort: a failure here is logged and startup continues.
    """
    try:
        app.setApplicationDisplayName("NowPlaying")
        app.setQuitOnLastWindowClosed(True)
        if ICON_PATH.exists():
            app.setWindowIcon(QIcon(str(ICON_PATH)))
    except Exception:  # noqa: BLE001
        logger.exception("Startup configuration failed, continuing")


def resolve_settings(
    args: argparse.Namespace, config: ConfigManager
) -> tuple[str, int, int]:
    """Merge command line arguments over saved settings.

    A URL given on the command line is saved as the new default.

    Returns:
        Tuple of (server URL, poll interval ms, HTTP timeout seconds).
    """
    url: str | None = args.url_flag or args.url
    if url:
        config.set_server_url(url)
    else:
        url = config.get_server_url()

    interval_ms = (
        clamp_poll_interval(args.interval)
        if args.interval is not None
        else config.get_poll_interval_ms()
    )
    timeout = (
        clamp_http_timeout(args.timeout)
        if args.timeout is not None
        else config.get_http_timeout()
    )
    return url.rstrip("/"), interval_ms, timeout


def main(argv: Sequence[str] | None = None) -> int:
    """Run the NowPlaying application.

    Returns:
        Exit code (0 for success).
    """
    # Set app metadata before creating QApplication (required for macOS)
    QApplication.setApplicationName("NowPlaying")
    QApplication.setOrganizationName("NowPlaying")
    QApplication.setOrganizationDomain("nowplaying.local")

    app = QApplication(sys.argv)

    args = build_parser().parse_args(list(argv) if argv is not None else app.arguments()[1:])
    configure_logging(args.debug)
    initialize_application(app)

    config = ConfigManager()
    url, interval_ms, timeout = resolve_settings(args, config)
    logger.info("Using player at %s (poll %d ms, timeout %d s)", url, interval_ms, timeout)

    api = PlayerApiClient(url, timeout=float(timeout))
    client = PlayerStateClient(api, poll_interval=interval_ms / 1000.0)

    def on_error(error: str) -> None:
        logger.debug("Player error: %s", error)

    client.error_occurred.connect(on_error)

    window = PlayerWindow(config=config)
    window.setWindowTitle(f"NowPlaying - {url}")
    window.bind_client(client)
    window.show()

    client.start()

    # Run the application
    exit_code = app.exec()

    # Cleanup
    client.stop()
    config.sync()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
