"""Tests for ConfigManager using QSettings."""

import pytest
from PySide6.QtCore import QByteArray

from nowplaying.core.config import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_SERVER_URL,
    ConfigManager,
    clamp_http_timeout,
    clamp_poll_interval,
)


@pytest.fixture
def config() -> ConfigManager:
    """Return a fresh ConfigManager for each test."""
    # Use unique organization/app to avoid test interference
    config = ConfigManager("NowPlayingTest", "TestConfig")
    config.clear()
    return config


class TestConfigManagerServer:
    """Test server URL settings."""

    def test_default_url(self, config: ConfigManager) -> None:
        """Test the default server URL."""
        assert config.get_server_url() == DEFAULT_SERVER_URL == "http://127.0.0.1:8080"

    def test_set_and_get_url(self, config: ConfigManager) -> None:
        """Test saving a server URL."""
        config.set_server_url("http://192.168.1.50:9000")
        assert config.get_server_url() == "http://192.168.1.50:9000"

    def test_trailing_slash_stripped(self, config: ConfigManager) -> None:
        """Test that a trailing slash is not stored."""
        config.set_server_url("http://host:8080/")
        assert config.get_server_url() == "http://host:8080"


class TestConfigManagerPolling:
    """Test polling settings."""

    def test_default_interval(self, config: ConfigManager) -> None:
        """Test the default poll interval."""
        assert config.get_poll_interval_ms() == DEFAULT_POLL_INTERVAL_MS == 1000

    def test_set_and_get_interval(self, config: ConfigManager) -> None:
        """Test saving a poll interval."""
        config.set_poll_interval_ms(2500)
        assert config.get_poll_interval_ms() == 2500

    def test_interval_clamped(self, config: ConfigManager) -> None:
        """Test poll interval bounds."""
        config.set_poll_interval_ms(1)
        assert config.get_poll_interval_ms() == 100
        config.set_poll_interval_ms(10**6)
        assert config.get_poll_interval_ms() == 60000

    def test_clamp_poll_interval(self) -> None:
        """Test the clamp helper."""
        assert clamp_poll_interval(50) == 100
        assert clamp_poll_interval(1000) == 1000
        assert clamp_poll_interval(90000) == 60000


class TestConfigManagerHttp:
    """Test HTTP settings."""

    def test_default_timeout(self, config: ConfigManager) -> None:
        """Test the default timeout."""
        assert config.get_http_timeout() == DEFAULT_HTTP_TIMEOUT == 5

    def test_timeout_clamped(self, config: ConfigManager) -> None:
        """Test timeout bounds."""
        config.set_http_timeout(0)
        assert config.get_http_timeout() == 1
        config.set_http_timeout(600)
        assert config.get_http_timeout() == 60

    def test_clamp_http_timeout(self) -> None:
        """Test the clamp helper."""
        assert clamp_http_timeout(-3) == 1
        assert clamp_http_timeout(10) == 10


class TestConfigManagerWindow:
    """Test window geometry storage."""

    def test_geometry_initially_none(self, config: ConfigManager) -> None:
        """Test that no geometry is stored initially."""
        assert config.get_window_geometry() is None

    def test_set_and_get_geometry(self, config: ConfigManager) -> None:
        """Test saving geometry bytes."""
        config.set_window_geometry(QByteArray(b"\x01\x02\x03"))
        geometry = config.get_window_geometry()
        assert geometry is not None
        assert bytes(geometry.data()) == b"\x01\x02\x03"


class TestConfigManagerGeneral:
    """Test general operations."""

    def test_clear_resets_to_defaults(self, config: ConfigManager) -> None:
        """Test that clear() restores defaults."""
        config.set_server_url("http://other")
        config.set_poll_interval_ms(5000)
        config.clear()
        assert config.get_server_url() == DEFAULT_SERVER_URL
        assert config.get_poll_interval_ms() == DEFAULT_POLL_INTERVAL_MS

    def test_sync_does_not_raise(self, config: ConfigManager) -> None:
        """Test that sync() can be called."""
        config.set_server_url("http://host")
        config.sync()
