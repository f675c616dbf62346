"""Poster screen.

Shows the tour poster and the setlist. Selecting a song opens its lyrics.
"""

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Header, Label, Static

from broadcast_songs.app.logging_config import get_logger
from broadcast_songs.app.models import Song
from broadcast_songs.app.state import AppState

logger = get_logger(__name__)

POSTER_TITLE = "Tour 2025/2026"


class PosterScreen(Screen):
    """Screen listing the songs of the current setlist."""

    BINDINGS = [
        ("enter", "open_song", "Lyrics"),
        ("r", "reload", "Reload"),
        ("q", "app.quit", "Quit"),
    ]

    def __init__(self, state: AppState):
        """Initialize the screen.

        Args:
            state: Application state
        """
        super().__init__()
        self.state = state

    def compose(self) -> ComposeResult:
        """Compose the screen layout."""
        yield Header()

        with Vertical(id="poster"):
            yield Label("[bold]tiefblau[/bold]", id="band")
            yield Label(f"[bold]{POSTER_TITLE}[/bold]", id="title")

            table = DataTable(id="song_table")
            table.add_columns("Song")
            table.cursor_type = "row"
            yield table

            yield Static("Loading setlist...", id="empty_message")

        yield Footer()

    def on_mount(self) -> None:
        """Handle mount event."""
        self.state.add_listener("songs", self._on_songs_changed)
        self._show_songs(self.state.songs)

    def on_unmount(self, event: events.Unmount) -> None:
        """Stop watching the setlist."""
        self.state.remove_listener("songs", self._on_songs_changed)

    def _on_songs_changed(self, songs: list[Song]) -> None:
        self._show_songs(songs)

    def _show_songs(self, songs: list[Song]) -> None:
        """Fill the table with the setlist."""
        table = self.query_one("#song_table", DataTable)
        table.clear()
        for song in songs:
            table.add_row(Text(song.title), key=str(song.id))

        empty_message = self.query_one("#empty_message", Static)
        empty_message.display = not songs
        logger.debug(f"Poster shows {len(songs)} song(s)")

    def _song_for_key(self, key: str):
        for song in self.state.songs:
            if str(song.id) == key:
                return song
        return None

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Open the lyrics for the selected row."""
        song = self._song_for_key(event.row_key.value)
        if song:
            self.app.open_song(song)

    def action_open_song(self) -> None:
        """Open the lyrics for the highlighted row."""
        table = self.query_one("#song_table", DataTable)
        rows = list(table.rows.keys())
        if not rows or table.cursor_row is None or table.cursor_row >= len(rows):
            self.notify("No song selected", severity="warning")
            return
        song = self._song_for_key(rows[table.cursor_row].value)
        if song:
            self.app.open_song(song)

    def action_reload(self) -> None:
        """Reload the setlist."""
        self.app.load_setlist()
