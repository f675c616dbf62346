"""Tests for CatalogService.

Tests bundled and remote setlist loading and failure handling.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from broadcast_songs.app.config import AppConfig
from broadcast_songs.app.models import CatalogFetchError, CatalogFormatError
from broadcast_songs.app.services.catalog import BUNDLED_SETLIST_PATH, CatalogService
from broadcast_songs.app.state import AppState


@pytest.fixture
def mock_session(sample_setlist_data):
    """Mocked requests session returning the sample setlist."""
    session = MagicMock()
    response = MagicMock()
    response.content = json.dumps(sample_setlist_data).encode("utf-8")
    response.raise_for_status.return_value = None
    session.get.return_value = response
    return session


class TestLoadBundled:
    """Tests for load_bundled."""

    def test_packaged_setlist_is_valid(self):
        """The bundled asset ships with the package and decodes."""
        service = CatalogService(AppConfig())

        songs = service.load_bundled()

        assert BUNDLED_SETLIST_PATH.exists()
        assert songs
        assert songs[0].title == "Amazing Grace"

    def test_configured_path(self, app_config, sample_songs):
        """local_setlist_path overrides the bundled asset."""
        service = CatalogService(app_config)

        assert service.load_bundled() == sample_songs

    def test_explicit_path(self, setlist_file, sample_songs):
        """An explicit path wins over config."""
        service = CatalogService(AppConfig())

        assert service.load_bundled(setlist_file) == sample_songs

    def test_missing_file(self, tmp_path):
        """Unreadable files raise a fetch error."""
        service = CatalogService(AppConfig())

        with pytest.raises(CatalogFetchError):
            service.load_bundled(tmp_path / "missing.json")

    def test_malformed_file(self, tmp_path):
        """Malformed files raise a format error."""
        path = tmp_path / "bad.json"
        path.write_text('[{"id": 1}]', encoding="utf-8")
        service = CatalogService(AppConfig())

        with pytest.raises(CatalogFormatError):
            service.load_bundled(path)


class TestFetchRemote:
    """Tests for fetch_remote."""

    def test_fetches_configured_url(self, mock_session, sample_songs):
        """The configured URL and timeout are used."""
        config = AppConfig(remote_setlist_url="https://example.com/tour.json", request_timeout_seconds=3.0)
        service = CatalogService(config, session=mock_session)

        songs = service.fetch_remote()

        assert songs == sample_songs
        mock_session.get.assert_called_once_with("https://example.com/tour.json", timeout=3.0)

    def test_network_error(self, mock_session):
        """Connection failures raise a fetch error."""
        mock_session.get.side_effect = requests.ConnectionError("unreachable")
        service = CatalogService(AppConfig(), session=mock_session)

        with pytest.raises(CatalogFetchError):
            service.fetch_remote()

    def test_http_error(self, mock_session):
        """HTTP error statuses raise a fetch error."""
        mock_session.get.return_value.raise_for_status.side_effect = requests.HTTPError("404")
        service = CatalogService(AppConfig(), session=mock_session)

        with pytest.raises(CatalogFetchError):
            service.fetch_remote()

    def test_bad_body(self, mock_session):
        """Undecodable bodies raise a format error."""
        mock_session.get.return_value.content = b"<html>"
        service = CatalogService(AppConfig(), session=mock_session)

        with pytest.raises(CatalogFormatError):
            service.fetch_remote()


class TestLoad:
    """Tests for source selection."""

    def test_bundled_by_default(self, app_config, mock_session):
        """Remote is not used unless enabled."""
        service = CatalogService(app_config, session=mock_session)

        service.load()

        mock_session.get.assert_not_called()

    def test_remote_when_enabled(self, app_config, mock_session, sample_songs):
        """use_remote_setlist switches to the remote URL."""
        app_config.use_remote_setlist = True
        service = CatalogService(app_config, session=mock_session)

        assert service.load() == sample_songs
        mock_session.get.assert_called_once()


class TestRefresh:
    """Tests for refresh."""

    def test_loads_into_state(self, app_config, sample_songs):
        """A successful load replaces the setlist."""
        state = AppState()
        service = CatalogService(app_config)

        assert service.refresh(state) is True
        assert state.songs == sample_songs

    def test_failure_keeps_previous_setlist(self, app_config, sample_songs, tmp_path):
        """A failed load leaves the setlist unchanged."""
        state = AppState()
        state.set_songs(sample_songs)
        app_config.local_setlist_path = tmp_path / "missing.json"
        service = CatalogService(app_config)

        assert service.refresh(state) is False
        assert state.songs == sample_songs

    def test_failure_on_first_launch_stays_empty(self, mock_session):
        """An unreachable remote on first launch leaves an empty setlist."""
        mock_session.get.side_effect = requests.Timeout("slow")
        state = AppState()
        service = CatalogService(AppConfig(use_remote_setlist=True), session=mock_session)

        assert service.refresh(state) is False
        assert state.songs == []

    def test_malformed_keeps_previous_setlist(self, app_config, sample_songs, tmp_path):
        """A malformed setlist is rejected entirely."""
        bad = tmp_path / "bad.json"
        bad.write_text("not json", encoding="utf-8")
        state = AppState()
        state.set_songs(sample_songs)
        app_config.local_setlist_path = bad

        assert CatalogService(app_config).refresh(state) is False
        assert state.songs == sample_songs

    def test_dispatches_state_update(self, app_config, sample_songs):
        """The state update runs through the dispatcher."""
        state = AppState()
        dispatched = []
        service = CatalogService(app_config)

        service.refresh(state, dispatch=lambda fn, *args: dispatched.append((fn, args)))

        assert state.songs == []
        fn, args = dispatched[0]
        fn(*args)
        assert state.songs == sample_songs

    def test_records_source(self, app_config, mock_session):
        """The state remembers whether the remote setlist was used."""
        app_config.use_remote_setlist = True
        state = AppState()

        CatalogService(app_config, session=mock_session).refresh(state)

        assert state.use_remote_setlist is True
