"""Setlist loading service for broadcast-songs.

Loads the song setlist either from the bundled JSON asset or from a
remote URL, depending on configuration. Load failures never propagate
past refresh(): the previous setlist stays in place.
"""

from pathlib import Path
from typing import Callable, Optional

import requests

from broadcast_songs.app.config import AppConfig
from broadcast_songs.app.logging_config import get_logger
from broadcast_songs.app.models import (
    CatalogFetchError,
    CatalogFormatError,
    CatalogLoadError,
    Song,
    parse_catalog,
)
from broadcast_songs.app.state import AppState

logger = get_logger(__name__)

BUNDLED_SETLIST_PATH = Path(__file__).parent.parent / "assets" / "local_setlist.json"


class CatalogService:
    """Service for loading the song setlist.

    Attributes:
        config: Application configuration
        session: HTTP session used for remote fetches
    """

    def __init__(self, config: AppConfig, session: Optional[requests.Session] = None):
        """Initialize the catalog service.

        Args:
            config: Application configuration
            session: Optional requests session (a new one is created if omitted)
        """
        self.config = config
        self.session = session or requests.Session()

    def load_bundled(self, path: Optional[Path] = None) -> list[Song]:
        """Load the setlist from a local JSON file.

        Args:
            path: Setlist file (defaults to the configured or bundled file)

        Returns:
            Songs in setlist order

        Raises:
            CatalogFetchError: If the file cannot be read
            CatalogFormatError: If the file is not a valid setlist
        """
        if path is None:
            path = self.config.local_setlist_path or BUNDLED_SETLIST_PATH

        try:
            data = path.read_bytes()
        except OSError as e:
            raise CatalogFetchError(f"Cannot read setlist {path}: {e}") from e

        songs = parse_catalog(data)
        logger.info(f"Loaded {len(songs)} song(s) from {path}")
        return songs

    def fetch_remote(self, url: Optional[str] = None) -> list[Song]:
        """Fetch the setlist from a remote URL.

        Args:
            url: Setlist URL (defaults to the configured URL)

        Returns:
            Songs in setlist order

        Raises:
            CatalogFetchError: If the request fails
            CatalogFormatError: If the response is not a valid setlist
        """
        if url is None:
            url = self.config.remote_setlist_url

        try:
            response = self.session.get(url, timeout=self.config.request_timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as e:
            raise CatalogFetchError(f"Cannot fetch setlist from {url}: {e}") from e

        songs = parse_catalog(response.content)
        logger.info(f"Fetched {len(songs)} song(s) from {url}")
        return songs

    def load(self) -> list[Song]:
        """Load the setlist from the configured source.

        Raises:
            CatalogLoadError: If loading fails
        """
        if self.config.use_remote_setlist:
            return self.fetch_remote()
        return self.load_bundled()

    def refresh(self, state: AppState, dispatch: Optional[Callable[..., None]] = None) -> bool:
        """Load the setlist into the application state.

        On failure the state keeps its current setlist.

        Args:
            state: Application state to update
            dispatch: Runs the state update on the UI thread (called inline if omitted)

        Returns:
            True if the setlist was loaded
        """
        try:
            songs = self.load()
        except CatalogFormatError as e:
            logger.warning(f"Setlist is malformed, keeping {len(state.songs)} song(s): {e}")
            return False
        except CatalogLoadError as e:
            logger.warning(f"Setlist unavailable, keeping {len(state.songs)} song(s): {e}")
            return False

        if dispatch is None:
            self._apply(state, songs)
        else:
            dispatch(self._apply, state, songs)
        return True

    def _apply(self, state: AppState, songs: list[Song]) -> None:
        state.use_remote_setlist = self.config.use_remote_setlist
        state.set_songs(songs)
