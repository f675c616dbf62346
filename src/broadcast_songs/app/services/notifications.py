"""Notification routing for broadcast-songs.

Matches the title carried by an inbound push notification against the
setlist and makes the matching song the active song. Foreground delivery
and user-opened notifications go through the same routine.

Payloads follow the APNs shape: {"aps": {"alert": "Title"}} or
{"aps": {"alert": {"title": ..., "body": "Title"}}}. Notifications without
a usable title, or whose title matches no song, are ignored.
"""

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

from broadcast_songs.app.config import DEFAULT_PUSH_TOPIC
from broadcast_songs.app.logging_config import get_logger
from broadcast_songs.app.models import Song
from broadcast_songs.app.services.messaging import MessagingClient
from broadcast_songs.app.state import AppState

logger = get_logger(__name__)

Dispatcher = Callable[..., None]


def extract_title(payload: Any) -> Optional[str]:
    """Extract the song title from a notification payload.

    Args:
        payload: Decoded notification payload

    Returns:
        The alert string, or the alert's body, or None if neither is present
    """
    if not isinstance(payload, Mapping):
        return None

    aps = payload.get("aps")
    if not isinstance(aps, Mapping):
        return None

    alert = aps.get("alert")
    if isinstance(alert, str):
        return alert
    if isinstance(alert, Mapping):
        body = alert.get("body")
        if isinstance(body, str):
            return body
    return None


def find_song(title: str, catalog: Sequence[Song], case_sensitive: bool = False) -> Optional[Song]:
    """Find the first song whose title matches.

    Titles are compared after trimming surrounding whitespace. Unless
    case_sensitive is set, the comparison is also case-insensitive.

    Args:
        title: Title to look for
        catalog: Setlist to search
        case_sensitive: Require an exact-case match

    Returns:
        Matching song or None
    """
    wanted = title.strip()
    if not case_sensitive:
        wanted = wanted.casefold()

    for song in catalog:
        candidate = song.title.strip()
        if not case_sensitive:
            candidate = candidate.casefold()
        if candidate == wanted:
            return song
    return None


def route_notification(
    payload: Any, catalog: Sequence[Song], case_sensitive: bool = False
) -> Optional[Song]:
    """Resolve a notification payload to a song in the setlist.

    Args:
        payload: Decoded notification payload
        catalog: Setlist to search
        case_sensitive: Require an exact-case title match

    Returns:
        Matching song, or None if there is no title or no match
    """
    title = extract_title(payload)
    if title is None:
        return None
    return find_song(title, catalog, case_sensitive=case_sensitive)


@dataclass(frozen=True)
class PresentationOptions:
    """How a foreground notification should be presented.

    Attributes:
        banner: Show a toast with the alert text
        sound: Ring the terminal bell
        title: Alert title, if any
        body: Alert body or bare alert string, if any
    """

    banner: bool = True
    sound: bool = True
    title: Optional[str] = None
    body: Optional[str] = None


def _call_inline(fn: Callable[..., None], *args) -> None:
    fn(*args)


class PushCoordinator:
    """Bridges the messaging provider's callbacks to the application state.

    Attributes:
        state: Application state that receives the active song
        dispatch: Runs a callable on the UI thread
        case_sensitive: Require exact-case title matches
        topic: Topic subscribed to once the provider has issued a token
        presenter: Shows the banner for foreground notifications
    """

    def __init__(
        self,
        state: AppState,
        dispatch: Optional[Dispatcher] = None,
        case_sensitive: bool = False,
        topic: str = DEFAULT_PUSH_TOPIC,
        presenter: Optional[Callable[[PresentationOptions], None]] = None,
    ):
        """Initialize the coordinator.

        Args:
            state: Application state
            dispatch: UI-thread dispatcher (calls inline if omitted)
            case_sensitive: Require exact-case title matches
            topic: Topic to subscribe to
            presenter: Shows the banner for foreground notifications (UI thread)
        """
        self.state = state
        self.dispatch = dispatch or _call_inline
        self.case_sensitive = case_sensitive
        self.topic = topic
        self.presenter = presenter

        self.registration_token: Optional[str] = None
        self.is_subscribed = False
        self._messaging: Optional[MessagingClient] = None

    @property
    def is_started(self) -> bool:
        """Whether a messaging provider is attached."""
        return self._messaging is not None

    def start(self, messaging: MessagingClient) -> None:
        """Attach to a messaging provider and request a registration token.

        The topic subscription follows once the provider issues a token.

        Args:
            messaging: Messaging provider client
        """
        self._messaging = messaging
        try:
            messaging.register(self.on_registration_token)
        except Exception as e:
            logger.error(f"Push registration error: {e}")
            self._messaging = None

    def stop(self) -> None:
        """Detach from the messaging provider."""
        if self._messaging is not None:
            self._messaging.close()
            self._messaging = None
        self.is_subscribed = False

    def on_registration_token(self, token: Optional[str]) -> None:
        """Record the token issued by the messaging provider.

        A revoked token (None) ends the current subscription.

        Args:
            token: Provider registration token (None if revoked)
        """
        self.registration_token = token
        logger.info(f"Push registration token: {token}")
        if token is None:
            if self.is_subscribed and self._messaging is not None:
                self._messaging.close()
            self.is_subscribed = False
            return
        self._maybe_subscribe()

    def _maybe_subscribe(self) -> None:
        if self._messaging is None or self.registration_token is None or self.is_subscribed:
            return
        try:
            self._messaging.subscribe(self.topic, on_message=self.will_present)
        except Exception as e:
            logger.error(f"Topic subscribe error ({self.topic!r}): {e}")
            return
        self.is_subscribed = True
        logger.info(f"Subscribed to topic '{self.topic}'")

    def apply_notification(self, payload: Any) -> Optional[Song]:
        """Route a payload and publish the matching song to the UI thread.

        Args:
            payload: Decoded notification payload

        Returns:
            The matched song, or None
        """
        # state.songs is only ever replaced, never mutated in place
        song = route_notification(payload, self.state.songs, case_sensitive=self.case_sensitive)
        if song is None:
            logger.debug(f"Notification ignored, no matching song (title={extract_title(payload)!r})")
            return None

        logger.info(f"Notification selected song {song.id}: {song.title}")
        self.dispatch(self.state.activate_song, song)
        return song

    def will_present(self, payload: Any) -> PresentationOptions:
        """Handle a notification delivered while the app is in the foreground.

        Args:
            payload: Decoded notification payload

        Returns:
            Presentation options for the banner
        """
        self.apply_notification(payload)
        options = presentation_for(payload)
        if self.presenter is not None and options.body is not None:
            self.dispatch(self.presenter, options)
        return options

    def did_receive(self, payload: Any) -> None:
        """Handle a notification the user opened the app from.

        Args:
            payload: Decoded notification payload
        """
        self.apply_notification(payload)


def presentation_for(payload: Any) -> PresentationOptions:
    """Build banner presentation options from a payload's alert."""
    title = None
    body = extract_title(payload)
    aps = payload.get("aps") if isinstance(payload, Mapping) else None
    alert = aps.get("alert") if isinstance(aps, Mapping) else None
    if isinstance(alert, Mapping) and isinstance(alert.get("title"), str):
        title = alert["title"]
    return PresentationOptions(title=title, body=body)
