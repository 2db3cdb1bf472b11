"""Qt user interface."""

from nowplaying.ui.main_window import PlayerWindow

__all__ = ["PlayerWindow"]
