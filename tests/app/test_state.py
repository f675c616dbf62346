"""Tests for AppState."""

from unittest.mock import MagicMock

from broadcast_songs.app.models import Song
from broadcast_songs.app.state import AppState


class TestAppStateDefaults:
    """Tests for initial state."""

    def test_starts_empty(self):
        """No setlist and no active song on startup."""
        state = AppState()

        assert state.songs == []
        assert state.active_song is None
        assert state.use_remote_setlist is False


class TestListeners:
    """Tests for listener management."""

    def test_listener_called(self, amazing_grace):
        """Listeners receive the new value."""
        state = AppState()
        listener = MagicMock()
        state.add_listener("active_song", listener)

        state.activate_song(amazing_grace)

        listener.assert_called_once_with(amazing_grace)

    def test_remove_listener(self, amazing_grace):
        """Removed listeners are not called."""
        state = AppState()
        listener = MagicMock()
        state.add_listener("active_song", listener)
        state.remove_listener("active_song", listener)

        state.activate_song(amazing_grace)

        listener.assert_not_called()

    def test_failing_listener_does_not_block_others(self, amazing_grace):
        """A raising listener is logged and the rest still run."""
        state = AppState()
        broken = MagicMock(side_effect=RuntimeError("boom"))
        healthy = MagicMock()
        state.add_listener("active_song", broken)
        state.add_listener("active_song", healthy)

        state.activate_song(amazing_grace)

        healthy.assert_called_once_with(amazing_grace)
        assert state.active_song == amazing_grace


class TestActiveSong:
    """Tests for active song lifecycle."""

    def test_activate(self, amazing_grace):
        """activate_song sets the active song."""
        state = AppState()

        state.activate_song(amazing_grace)

        assert state.active_song == amazing_grace

    def test_reactivating_same_song_is_silent(self, amazing_grace):
        """Setting the same song again does not notify."""
        state = AppState()
        listener = MagicMock()
        state.add_listener("active_song", listener)

        state.activate_song(amazing_grace)
        state.activate_song(amazing_grace)

        listener.assert_called_once()

    def test_switch_song(self, amazing_grace, shout_to_the_lord):
        """A new song replaces the current one."""
        state = AppState()
        state.activate_song(amazing_grace)

        state.activate_song(shout_to_the_lord)

        assert state.active_song == shout_to_the_lord

    def test_clear(self, amazing_grace):
        """clear_active_song empties the state and notifies None."""
        state = AppState()
        listener = MagicMock()
        state.activate_song(amazing_grace)
        state.add_listener("active_song", listener)

        state.clear_active_song()

        assert state.active_song is None
        listener.assert_called_once_with(None)

    def test_clear_when_empty_is_silent(self):
        """Clearing an empty state does not notify."""
        state = AppState()
        listener = MagicMock()
        state.add_listener("active_song", listener)

        state.clear_active_song()

        listener.assert_not_called()


class TestSetSongs:
    """Tests for setlist replacement."""

    def test_set_songs_notifies(self, sample_songs):
        """Listeners see the new setlist."""
        state = AppState()
        listener = MagicMock()
        state.add_listener("songs", listener)

        state.set_songs(sample_songs)

        assert state.songs == sample_songs
        listener.assert_called_once_with(sample_songs)

    def test_active_song_kept_when_still_listed(self, sample_songs, amazing_grace):
        """Reloading a setlist that still has the song keeps it active."""
        state = AppState()
        state.set_songs(sample_songs)
        state.activate_song(amazing_grace)

        state.set_songs(list(sample_songs))

        assert state.active_song == amazing_grace

    def test_active_song_cleared_when_removed(self, sample_songs, amazing_grace, shout_to_the_lord):
        """Reloading without the active song clears it."""
        state = AppState()
        state.set_songs(sample_songs)
        state.activate_song(amazing_grace)

        state.set_songs([shout_to_the_lord])

        assert state.active_song is None

    def test_active_song_cleared_when_changed(self, sample_songs, amazing_grace):
        """A song whose data changed on reload is no longer the same song."""
        state = AppState()
        state.set_songs(sample_songs)
        state.activate_song(amazing_grace)
        edited = Song(
            id=amazing_grace.id,
            title=amazing_grace.title,
            lyrics="New verse",
            background_color=amazing_grace.background_color,
            foreground_color=amazing_grace.foreground_color,
        )

        state.set_songs([edited])

        assert state.active_song is None

    def test_set_songs_copies_list(self, sample_songs):
        """Later changes to the caller's list do not leak in."""
        state = AppState()
        songs = list(sample_songs)

        state.set_songs(songs)
        songs.clear()

        assert len(state.songs) == 2
