"""Broadcast Songs TUI.

Interactive Textual application showing the setlist poster and lyrics
screens, switching songs when a broadcast notification names one.
"""

__version__ = "0.1.0"
