"""Screens for the Broadcast Songs TUI."""

from broadcast_songs.app.screens.poster import PosterScreen
from broadcast_songs.app.screens.song import SongScreen

__all__ = ["PosterScreen", "SongScreen"]
