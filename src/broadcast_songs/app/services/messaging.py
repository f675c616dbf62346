"""Push messaging provider client.

Registers with an ntfy-compatible server, then subscribes to a topic
and hands each message to a callback as an APNs-shaped payload, so the notification router sees the
same structure no matter which provider delivered it.

Message delivery happens on a background thread; message callbacks are
invoked on that thread.
"""

import json
import threading
from typing import Any, Callable, Optional, Protocol

import requests

from broadcast_songs.app.logging_config import get_logger

logger = get_logger(__name__)

MessageCallback = Callable[[dict], Any]
TokenCallback = Callable[[Optional[str]], None]


class MessagingClient(Protocol):
    """Interface of a push messaging provider."""

    def register(self, on_token: TokenCallback) -> None:
        """Request a registration token; on_token receives it, or None on failure."""
        ...

    def subscribe(self, topic: str, on_message: MessageCallback) -> None:
        """Start delivering messages for a topic."""
        ...

    def close(self) -> None:
        """Stop delivering messages."""
        ...


def payload_from_event(event: dict) -> Optional[dict]:
    """Convert an ntfy stream event to an APNs-shaped payload.

    Args:
        event: Decoded ntfy JSON event

    Returns:
        Payload with aps.alert.title/body, or None for non-message events
    """
    if event.get("event") != "message":
        return None

    alert: dict[str, str] = {}
    if isinstance(event.get("title"), str):
        alert["title"] = event["title"]
    if isinstance(event.get("message"), str):
        alert["body"] = event["message"]
    return {"aps": {"alert": alert}}


class NtfyMessaging:
    """Messaging client for an ntfy-compatible push server.

    Attributes:
        server: Base URL of the server (e.g. "https://ntfy.sh")
        session: HTTP session used for the subscription stream
    """

    def __init__(self, server: str, session: Optional[requests.Session] = None):
        """Initialize the client.

        Args:
            server: Base URL of the server
            session: Optional requests session
        """
        self.server = server.rstrip("/")
        self.session = session or requests.Session()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._response: Optional[requests.Response] = None

    def topic_url(self, topic: str) -> str:
        """Get the public URL of a topic."""
        return f"{self.server}/{topic}"

    def register(self, on_token: TokenCallback, timeout: float = 10.0) -> None:
        """Check the server is reachable and report it as the registration token.

        Args:
            on_token: Called with the server URL, or None if the server is unavailable
            timeout: Health check timeout in seconds
        """
        url = f"{self.server}/v1/health"
        try:
            response = self.session.get(url, timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Push server registration failed ({url}): {e}")
            on_token(None)
            return
        on_token(self.server)

    def subscribe(self, topic: str, on_message: MessageCallback) -> None:
        """Start streaming a topic in a background thread.

        Args:
            topic: Topic name
            on_message: Called with each APNs-shaped payload
        """
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Already subscribed")

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._listen,
            args=(topic, on_message),
            name=f"ntfy-{topic}",
            daemon=True,
        )
        self._thread.start()

    def _listen(self, topic: str, on_message: MessageCallback) -> None:
        url = f"{self.topic_url(topic)}/json"
        try:
            with self.session.get(url, stream=True, timeout=(10, None)) as response:
                response.raise_for_status()
                self._response = response
                for line in response.iter_lines():
                    if self._stop_event.is_set():
                        break
                    if line:
                        self.handle_line(line, on_message)
        except requests.RequestException as e:
            if not self._stop_event.is_set():
                logger.error(f"Push subscription to {url} ended: {e}")
        finally:
            self._response = None

    def handle_line(self, line: bytes, on_message: MessageCallback) -> None:
        """Process one line of the ntfy JSON stream.

        Args:
            line: Raw JSON line
            on_message: Message callback
        """
        try:
            event = json.loads(line)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning(f"Skipping malformed push event: {line[:200]!r}")
            return

        if not isinstance(event, dict):
            return

        if event.get("event") == "open":
            logger.debug(f"Push stream open for topic '{event.get('topic')}'")
            return

        payload = payload_from_event(event)
        if payload is not None:
            on_message(payload)

    def close(self) -> None:
        """Stop the subscription stream."""
        self._stop_event.set()
        if self._response is not None:
            self._response.close()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None
