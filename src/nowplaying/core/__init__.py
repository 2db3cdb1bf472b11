"""Core application logic layer.

This module bridges the async HTTP client with the Qt UI layer.

Classes:
    PlayerStateClient: Polls player state and emits render signals.
    ConfigManager: QSettings wrapper for configuration.
"""

from nowplaying.core.config import ConfigManager
from nowplaying.core.state_client import PlayerStateClient

__all__ = ["ConfigManager", "PlayerStateClient"]
