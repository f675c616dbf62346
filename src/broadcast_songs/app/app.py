"""Main TUI application for Broadcast Songs.

Textual-based application showing the tour poster and setlist, with
full-screen lyrics that follow song broadcasts from the push server.
"""

import threading
from typing import Any, Callable, Optional

from textual.app import App

from broadcast_songs.app.config import AppConfig
from broadcast_songs.app.logging_config import get_logger
from broadcast_songs.app.models import Song
from broadcast_songs.app.screens.poster import PosterScreen
from broadcast_songs.app.screens.song import SongScreen
from broadcast_songs.app.services.catalog import CatalogService
from broadcast_songs.app.services.messaging import MessagingClient, NtfyMessaging
from broadcast_songs.app.services.notifications import PresentationOptions, PushCoordinator
from broadcast_songs.app.state import AppState

logger = get_logger(__name__)


class BroadcastSongsApp(App):
    """Broadcast Songs application.

    Shows the poster screen with the setlist and switches to a song's
    lyrics whenever a notification names it.
    """

    CSS_PATH = "screens/app.tcss"
    TITLE = "Broadcast Songs"
    SUB_TITLE = "Setlist"

    def __init__(
        self,
        config: AppConfig,
        launch_notification: Optional[dict] = None,
        messaging: Optional[MessagingClient] = None,
        catalog: Optional[CatalogService] = None,
        *args,
        **kwargs,
    ):
        """Initialize the application.

        Args:
            config: Application configuration
            launch_notification: Payload of the notification the app was opened from
            messaging: Push messaging client (built from config if omitted)
            catalog: Catalog service (built from config if omitted)
        """
        super().__init__(*args, **kwargs)

        self.config = config
        self.launch_notification = launch_notification
        self._ui_thread_id = threading.get_ident()

        self.state = AppState(use_remote_setlist=config.use_remote_setlist)
        self.catalog = catalog or CatalogService(config)
        self.coordinator = PushCoordinator(
            self.state,
            dispatch=self.run_on_ui,
            case_sensitive=config.case_sensitive_titles,
            topic=config.push_topic,
            presenter=self.present_notification,
        )
        if messaging is None and config.push_enabled:
            messaging = NtfyMessaging(config.push_server)
        self.messaging = messaging

        self.state.add_listener("active_song", self._on_active_song_changed)

    def run_on_ui(self, fn: Callable[..., Any], *args) -> None:
        """Run a callable on the UI thread.

        Args:
            fn: Callable to run
            *args: Positional arguments for fn
        """
        if threading.get_ident() == self._ui_thread_id:
            fn(*args)
        else:
            self.call_from_thread(fn, *args)

    def on_mount(self) -> None:
        """Handle app mount event."""
        self._ui_thread_id = threading.get_ident()
        logger.info("App mounted, pushing poster screen")
        self.push_screen(PosterScreen(self.state))
        self.load_setlist()

    def load_setlist(self) -> None:
        """Load the setlist in a background worker."""
        self.run_worker(self._load_setlist, thread=True, exclusive=True, group="setlist")

    def _load_setlist(self) -> None:
        source = self.config.remote_setlist_url if self.config.use_remote_setlist else "bundled"
        logger.info(f"Loading setlist ({source})")
        self.catalog.refresh(self.state, dispatch=self.run_on_ui)

        if self.launch_notification is not None:
            payload, self.launch_notification = self.launch_notification, None
            logger.info("Delivering launch notification")
            self.coordinator.did_receive(payload)

        if self.messaging is not None and not self.coordinator.is_started:
            self.coordinator.start(self.messaging)

    def present_notification(self, options: PresentationOptions) -> None:
        """Show a foreground notification banner.

        Args:
            options: Presentation options from the coordinator
        """
        if options.banner and options.body:
            self.notify(options.body, title=options.title or "")
        if options.sound:
            self.bell()

    def _on_active_song_changed(self, song: Optional[Song]) -> None:
        self._pop_song_screens()
        if song is not None:
            logger.info(f"Showing active song: {song.title}")
            self.push_screen(SongScreen(song, from_notification=True))

    def _pop_song_screens(self) -> None:
        while isinstance(self.screen, SongScreen):
            self.pop_screen()

    def open_song(self, song: Song) -> None:
        """Open a song's lyrics from the poster.

        Args:
            song: Song to show
        """
        logger.info(f"Opening song: {song.title}")
        self.push_screen(SongScreen(song))

    def close_song(self, screen: SongScreen) -> None:
        """Leave a song screen.

        Dismissing the notification-selected song clears it from the state,
        which returns to the poster.

        Args:
            screen: Song screen being closed
        """
        if screen.from_notification and self.state.active_song == screen.song:
            self.state.clear_active_song()
        elif self.screen is screen:
            self.pop_screen()

    def action_quit(self) -> None:
        """Quit the application."""
        logger.info("Quit requested")
        self.exit()

    def on_unmount(self) -> None:
        """Stop push delivery however the app exits."""
        self.coordinator.stop()
        logger.info("App unmounted, push subscription stopped")
