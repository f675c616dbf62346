"""Broadcast Songs - a song poster and lyrics viewer driven by push notifications.

This package provides:
- A Textual TUI showing a tour poster with the current setlist
- Full-screen lyrics views with per-song colors
- Push-notification routing that jumps straight to the announced song
"""

__version__ = "0.1.0"
