"""Shared fixtures for app tests."""

import json

import pytest

from broadcast_songs.app.config import AppConfig
from broadcast_songs.app.models import Song


@pytest.fixture
def amazing_grace():
    """First song of the sample setlist."""
    return Song(
        id=1,
        title="Amazing Grace",
        lyrics="Amazing grace! How sweet the sound",
        background_color="blau",
        foreground_color="weiß",
    )


@pytest.fixture
def shout_to_the_lord():
    """Second song of the sample setlist."""
    return Song(
        id=2,
        title="Shout to the Lord",
        lyrics="My Jesus, my Saviour",
        background_color="#1E1E2E",
        foreground_color="gelb",
    )


@pytest.fixture
def sample_songs(amazing_grace, shout_to_the_lord):
    """Two-song setlist."""
    return [amazing_grace, shout_to_the_lord]


@pytest.fixture
def sample_setlist_data(sample_songs):
    """Setlist as decoded JSON."""
    return [song.to_dict() for song in sample_songs]


@pytest.fixture
def setlist_file(tmp_path, sample_setlist_data):
    """Setlist JSON file on disk."""
    path = tmp_path / "setlist.json"
    path.write_text(json.dumps(sample_setlist_data), encoding="utf-8")
    return path


@pytest.fixture
def app_config(tmp_path, setlist_file):
    """Config reading the sample setlist, with push disabled."""
    return AppConfig(
        local_setlist_path=setlist_file,
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def body_payload():
    """Notification whose alert is an object with a body."""
    return {"aps": {"alert": {"title": "Now playing", "body": "Amazing Grace"}}}


@pytest.fixture
def string_payload():
    """Notification whose alert is a bare string."""
    return {"aps": {"alert": "Shout to the Lord"}}
