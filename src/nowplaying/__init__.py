"""NowPlaying: desktop remote for a media player HTTP control API."""
