"""Song screen.

Full-screen lyrics in the song's own colors.
"""

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.widgets import Label, Static

from broadcast_songs.app.models import Song
from broadcast_songs.app.services.colors import GRAY, WHITE, resolve_color_or


class SongScreen(Screen):
    """Screen showing one song's lyrics."""

    BINDINGS = [
        ("escape", "back", "Back"),
        ("q", "app.quit", "Quit"),
    ]

    def __init__(self, song: Song, from_notification: bool = False):
        """Initialize the screen.

        Args:
            song: Song to display
            from_notification: Whether a notification opened this screen
        """
        super().__init__()
        self.song = song
        self.from_notification = from_notification
        self.lyrics_background = resolve_color_or(song.background_color, GRAY)
        self.lyrics_foreground = resolve_color_or(song.foreground_color, WHITE)

    def compose(self) -> ComposeResult:
        """Compose the screen layout."""
        with VerticalScroll(id="lyrics_scroll"):
            yield Label(f"[bold]{escape(self.song.title)}[/bold]", id="song_title")
            yield Static(self.song.lyrics, id="lyrics", markup=False)

    def on_mount(self) -> None:
        """Apply the song colors."""
        self.styles.background = self.lyrics_background.to_textual()
        for widget in (self.query_one("#song_title"), self.query_one("#lyrics")):
            widget.styles.color = self.lyrics_foreground.to_textual()

    def action_back(self) -> None:
        """Return to the poster."""
        self.app.close_song(self)
