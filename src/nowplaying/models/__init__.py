"""Data models for remote player state."""

from nowplaying.models.playback_state import CurrentSong, PlaybackState

__all__ = ["CurrentSong", "PlaybackState"]
