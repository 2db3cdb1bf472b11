"""Polling client that mirrors remote player state into the UI.

This module provides a Qt-integrated client that polls the player's state
endpoint on a fixed interval, forwards play/pause intents to the control
endpoint, and emits signals the window renders from.
"""

from __future__ import annotations

import asyncio
import logging
import math
import threading
from collections.abc import Coroutine
from typing import Any

from PySide6.QtCore import QObject, Signal

from nowplaying.api.client import PlayerApiClient, PlayerApiError
from nowplaying.models.playback_state import PlaybackState

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0  # seconds

PLAYING_LABEL = "⏸"
PAUSED_LABEL = "▶"

_SLEEP_STEP = 0.1  # seconds, bounds shutdown latency
_STOP_TIMEOUT = 5.0  # seconds


def play_pause_label(is_playing: bool) -> str:
    """Return the button glyph for a playback flag."""
    return PLAYING_LABEL if is_playing else PAUSED_LABEL


def toggle_action(is_playing: bool) -> str:
    """Return the control action that inverts a playback flag."""
    return "pause" if is_playing else "play"


def next_deadline(deadline: float, now: float, interval: float) -> float:
    """Return the next poll deadline after ``deadline``.

    Deadlines advance by whole intervals from the start time so timer
    latency does not accumulate. Ticks that are already in the past are
    skipped rather than fired in a burst.

    Args:
        deadline: The deadline that just fired (loop time).
        now: Current loop time.
        interval: Poll interval in seconds.

    Returns:
        The next deadline, never earlier than ``now``.
    """
    deadline += interval
    if deadline < now:
        missed = math.ceil((now - deadline) / interval)
        logger.debug("Skipping %d missed poll tick(s)", missed)
        deadline += missed * interval
    return deadline


class PlayerStateClient(QObject):
    """Keep a play/pause control and album art in sync with the player.

    Runs an asyncio event loop in a background thread. The state endpoint is
    fetched once at start and then every ``poll_interval`` seconds. Each
    refresh renders the art and the button label, then records the fetched
    playback flag for the next cycle.

    Example:
        client = PlayerStateClient(PlayerApiClient("http://192.168.1.50:8080"))
        client.label_changed.connect(button.setText)
        client.art_source_changed.connect(art_view.set_source)
        client.art_loaded.connect(art_view.set_art)
        client.start()
        ...
        client.toggle()
    """

    # Emitted with the album art URL, or "" when there is no art
    art_source_changed = Signal(str)

    # Emitted when an album art download finishes
    # Parameters: (url: str, art_data: bytes, mime_type: str); empty bytes on failure
    art_loaded = Signal(str, bytes, str)

    # Emitted with the play/pause glyph to display
    label_changed = Signal(str)

    # Emitted with each successfully fetched PlaybackState
    state_received = Signal(object)

    # Emitted on failed requests (diagnostics only)
    error_occurred = Signal(str)

    def __init__(
        self,
        api: PlayerApiClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        parent: QObject | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api: HTTP client for the player server.
            poll_interval: Seconds between state polls.
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self._api = api
        self._poll_interval = poll_interval

        # Last playback flag reported by the server; written only by _apply_state
        self._is_playing = False

        self._running = False
        self._thread: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._art_task: asyncio.Task[None] | None = None

    @property
    def api(self) -> PlayerApiClient:
        """Return the HTTP client."""
        return self._api

    @property
    def poll_interval(self) -> float:
        """Return the poll interval in seconds."""
        return self._poll_interval

    @property
    def is_playing(self) -> bool:
        """Return the last playback flag reported by the server."""
        return self._is_playing

    @property
    def is_running(self) -> bool:
        """Return True while the polling loop is active."""
        return self._running

    def set_poll_interval(self, seconds: float) -> None:
        """Update the poll interval; takes effect from the next tick."""
        self._poll_interval = seconds

    def start(self) -> None:
        """Start polling."""
        if not self._running:
            self._running = True
            self._thread = threading.Thread(target=self._run_loop, daemon=True)
            self._thread.start()
            logger.info(
                "PlayerStateClient started for %s (every %.2fs)",
                self._api.base_url,
                self._poll_interval,
            )

    def stop(self) -> None:
        """Stop polling and wait for the loop thread to exit.

        Requests already running in executor threads are waited for, so this
        can block for up to the HTTP timeout.
        """
        self._running = False
        if self._thread:
            self._thread.join(timeout=_STOP_TIMEOUT + self._api.timeout)
            if self._thread.is_alive():
                logger.warning("PlayerStateClient thread did not exit in time")
            self._thread = None
            logger.info("PlayerStateClient stopped")

    def toggle(self) -> str:
        """Request the inverse of the last known playback state.

        The display is not changed here; it follows from the state refresh
        that completes the control request.

        Returns:
            The action sent ("play" or "pause").
        """
        action = toggle_action(self._is_playing)
        logger.debug("Toggle: is_playing=%s -> %s", self._is_playing, action)
        self.send_control(action)
        return action

    def send_control(self, action: str) -> None:
        """Send a control action, then refresh state.

        Thread-safe call from main thread. Returns immediately.

        Args:
            action: Action name ("play", "pause", or any the server accepts).
        """
        loop = self._loop
        if loop is None or not loop.is_running():
            logger.debug("Dropping control %r: client is not running", action)
            return
        try:
            loop.call_soon_threadsafe(self._spawn_control, action)
        except RuntimeError:
            logger.debug("Dropping control %r: event loop closed", action)

    async def refresh_state(self) -> PlaybackState:
        """Fetch state and render it.

        Returns:
            The fetched PlaybackState.

        Raises:
            PlayerApiError: If the state request fails or the body is malformed.
        """
        state = await self._api.get_state()
        self._render(state)
        return state

    def _render(self, state: PlaybackState) -> None:
        """Emit art and label for a fetched state, then record its flag."""
        if state.has_picture:
            url = self._api.album_art_url()
            self.art_source_changed.emit(url)
            if self._art_task is None or self._art_task.done():
                self._art_task = self._spawn(self._load_album_art(url))
            else:
                # The view accepts the in-flight bytes for an earlier source
                logger.debug("Album art download in flight, not fetching %s", url)
        else:
            self.art_source_changed.emit("")

        # Label uses the flag from before this fetch; see DESIGN.md.
        self.label_changed.emit(play_pause_label(self._is_playing))
        self._apply_state(state)
        self.state_received.emit(state)

    def _apply_state(self, state: PlaybackState) -> None:
        self._is_playing = state.is_playing

    async def _safe_refresh(self) -> None:
        """Refresh state, logging failures instead of raising."""
        try:
            await self.refresh_state()
        except PlayerApiError as e:
            logger.warning("State refresh failed: %s", e)
            self.error_occurred.emit(str(e))
        except Exception as e:  # noqa: BLE001
            logger.exception("Unexpected error refreshing state: %s", e)
            self.error_occurred.emit(f"Unexpected error: {e}")

    async def _control_and_refresh(self, action: str) -> None:
        """Send a control action; refresh state whether or not it succeeded."""
        try:
            await self._api.control(action)
        except PlayerApiError as e:
            logger.debug("Control %r failed: %s", action, e)
            self.error_occurred.emit(str(e))
        except Exception as e:  # noqa: BLE001
            logger.warning("Unexpected error sending control %r: %s", action, e)
            self.error_occurred.emit(f"Unexpected error: {e}")
        await self._safe_refresh()

    async def _load_album_art(self, url: str) -> None:
        """Download album art and emit it."""
        try:
            art = await self._api.get_album_art(url)
        except PlayerApiError as e:
            logger.debug("Could not fetch album art from %s: %s", url, e)
            self.art_loaded.emit(url, b"", "")
            return
        self.art_loaded.emit(url, art.data, art.mime_type)

    def _spawn_control(self, action: str) -> None:
        self._spawn(self._control_and_refresh(action))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        """Run a coroutine as a tracked task on the current loop."""
        task = asyncio.get_event_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _run_loop(self) -> None:
        """Background thread: run asyncio event loop."""
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        try:
            loop.run_until_complete(self._poll_loop())
        finally:
            self._loop = None
            pending = [task for task in self._tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            self._art_task = None
            # Wait for blocking HTTP calls still running in executor threads
            loop.run_until_complete(loop.shutdown_default_executor())
            loop.close()

    async def _poll_loop(self) -> None:
        """Fire a refresh now and then once per interval until stopped."""
        loop = asyncio.get_event_loop()
        deadline = loop.time()
        while self._running:
            self._spawn(self._safe_refresh())
            deadline = next_deadline(deadline, loop.time(), self._poll_interval)
            await self._sleep_until(deadline)

    async def _sleep_until(self, deadline: float) -> None:
        """Sleep until a loop-time deadline in small steps to allow quick shutdown."""
        loop = asyncio.get_event_loop()
        while self._running:
            remaining = deadline - loop.time()
            if remaining <= 0:
                return
            await asyncio.sleep(min(remaining, _SLEEP_STEP))
