"""Song model and setlist decoding.

Songs are immutable once decoded. A setlist is a JSON array of song objects
and is decoded all-or-nothing: one bad entry rejects the whole list.
"""

import json
from dataclasses import dataclass
from typing import Any, Union


class CatalogLoadError(Exception):
    """Base error for setlist loading failures."""


class CatalogFormatError(CatalogLoadError):
    """Setlist data could not be decoded into songs."""


class CatalogFetchError(CatalogLoadError):
    """Setlist data could not be read from disk or fetched from the network."""


@dataclass(frozen=True)
class Song:
    """A song in the setlist.

    Attributes:
        id: Small unsigned id (0-255), unique within a setlist
        title: Song title, the key used to match notifications
        lyrics: Lyrics text for display
        background_color: Color name or hex string for the lyrics background
        foreground_color: Color name or hex string for the lyrics text
    """

    id: int
    title: str
    lyrics: str
    background_color: str
    foreground_color: str

    @classmethod
    def from_dict(cls, data: Any) -> "Song":
        """Create a Song from a decoded JSON object.

        Unknown keys are ignored.

        Args:
            data: Mapping with id, title, lyrics, backgroundColor, foregroundColor

        Returns:
            Song instance

        Raises:
            CatalogFormatError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise CatalogFormatError(f"Song entry must be an object, got {type(data).__name__}")

        song_id = _require(data, "id", int)
        if not 0 <= song_id <= 255:
            raise CatalogFormatError(f"Song id out of range 0-255: {song_id}")

        return cls(
            id=song_id,
            title=_require(data, "title", str),
            lyrics=_require(data, "lyrics", str),
            background_color=_require(data, "backgroundColor", str),
            foreground_color=_require(data, "foregroundColor", str),
        )

    def to_dict(self) -> dict:
        """Convert to the setlist JSON representation."""
        return {
            "id": self.id,
            "title": self.title,
            "lyrics": self.lyrics,
            "backgroundColor": self.background_color,
            "foregroundColor": self.foreground_color,
        }


def _require(data: dict, key: str, expected: type) -> Any:
    if key not in data:
        raise CatalogFormatError(f"Missing required field: {key}")
    value = data[key]
    # bool is an int subclass but never a valid id
    if not isinstance(value, expected) or isinstance(value, bool):
        raise CatalogFormatError(
            f"Field {key!r} must be {expected.__name__}, got {type(value).__name__}"
        )
    return value


def parse_catalog(data: Union[str, bytes]) -> list[Song]:
    """Decode a setlist JSON document.

    Args:
        data: Raw JSON text or bytes

    Returns:
        Songs in setlist order

    Raises:
        CatalogFormatError: If the document is not a valid setlist
    """
    try:
        decoded = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogFormatError(f"Invalid setlist JSON: {e}") from e

    if not isinstance(decoded, list):
        raise CatalogFormatError("Setlist must be a JSON array")

    songs = [Song.from_dict(entry) for entry in decoded]

    seen: set[int] = set()
    for song in songs:
        if song.id in seen:
            raise CatalogFormatError(f"Duplicate song id: {song.id}")
        seen.add(song.id)

    return songs
