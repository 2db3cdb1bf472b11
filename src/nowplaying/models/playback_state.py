"""PlaybackState model parsed from the player's state endpoint."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CurrentSong:
    """Track currently loaded on the remote player.

    Attributes:
        picture: Whether the server has album art for this track.
        title: Track title, if reported.
        artist: Artist name, if reported.
        album: Album name, if reported.
    """

    picture: bool = False
    title: str = ""
    artist: str = ""
    album: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CurrentSong:
        """Build a CurrentSong from the ``currentSong`` JSON object.

        ``picture`` may be any JSON value and is read with JavaScript
        truthiness, so an empty object or array still counts as present.
        """
        return cls(
            picture=js_truthy(data.get("picture")),
            title=_as_text(data.get("title")),
            artist=_as_text(data.get("artist")),
            album=_as_text(data.get("album")),
        )

    @property
    def display_text(self) -> str:
        """Return "title - artist" for display, or whichever part exists."""
        return " - ".join(part for part in (self.title, self.artist) if part)


@dataclass(frozen=True)
class PlaybackState:
    """Snapshot of the server's playback state.

    Attributes:
        is_playing: Server-reported playback status.
        current_song: Loaded track, or None if nothing is loaded.
    """

    is_playing: bool = False
    current_song: CurrentSong | None = None

    @property
    def has_picture(self) -> bool:
        """Return True if album art is available for the current song."""
        return self.current_song is not None and self.current_song.picture

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PlaybackState:
        """Build a PlaybackState from the decoded ``/api/state`` body.

        Args:
            data: Decoded JSON object.

        Returns:
            Parsed PlaybackState. A missing ``isPlaying`` reads as False and
            a ``currentSong`` that is not an object reads as absent.
        """
        song = data.get("currentSong")
        return cls(
            is_playing=js_truthy(data.get("isPlaying", False)),
            current_song=CurrentSong.from_dict(song) if isinstance(song, Mapping) else None,
        )


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def js_truthy(value: object) -> bool:
    """Return the truthiness a browser client gives a decoded JSON value.

    Objects and arrays are truthy even when empty; NaN is falsy.
    """
    if isinstance(value, (Mapping, list)):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)
