"""Reusable UI widgets."""

from nowplaying.ui.widgets.album_art import AlbumArtView

__all__ = ["AlbumArtView"]
