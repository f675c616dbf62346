"""Application state for broadcast-songs.

Owns the loaded setlist and the notification-selected active song.
One AppState is created by the app at startup and passed to the screens
and the push coordinator; it is only mutated on the UI thread.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from broadcast_songs.app.logging_config import get_logger
from broadcast_songs.app.models import Song

logger = get_logger(__name__)


@dataclass
class AppState:
    """Observable application state.

    Attributes:
        songs: Setlist snapshot, in display order
        active_song: Song selected by the most recent matching notification
        use_remote_setlist: Whether the setlist was loaded from the remote URL
    """

    songs: list[Song] = field(default_factory=list)
    active_song: Optional[Song] = None
    use_remote_setlist: bool = False

    _listeners: dict[str, list[Callable]] = field(default_factory=dict, repr=False, compare=False)

    def add_listener(self, property_name: str, callback: Callable) -> None:
        """Add a listener for a property change.

        Args:
            property_name: Name of the property to watch
            callback: Function to call with the new value
        """
        self._listeners.setdefault(property_name, []).append(callback)

    def remove_listener(self, property_name: str, callback: Callable) -> None:
        """Remove a property change listener.

        Args:
            property_name: Name of the property
            callback: Callback to remove
        """
        if property_name in self._listeners:
            self._listeners[property_name] = [
                cb for cb in self._listeners[property_name] if cb != callback
            ]

    def _notify(self, property_name: str, value) -> None:
        """Notify listeners of a property change."""
        for callback in list(self._listeners.get(property_name, [])):
            try:
                callback(value)
            except Exception:
                logger.exception(f"Listener for {property_name!r} failed")

    def set_songs(self, songs: list[Song]) -> None:
        """Replace the setlist.

        Clears the active song if it is not part of the new setlist.

        Args:
            songs: New setlist
        """
        self.songs = list(songs)
        self._notify("songs", self.songs)

        if self.active_song is not None and self.active_song not in self.songs:
            logger.info(f"Active song '{self.active_song.title}' not in new setlist, clearing")
            self.clear_active_song()

    def activate_song(self, song: Song) -> None:
        """Show a song because a notification selected it.

        Re-activating the current song does not notify listeners.

        Args:
            song: Song from the current setlist
        """
        if song == self.active_song:
            return
        self.active_song = song
        self._notify("active_song", song)

    def clear_active_song(self) -> None:
        """Dismiss the notification-selected song."""
        if self.active_song is None:
            return
        self.active_song = None
        self._notify("active_song", None)
