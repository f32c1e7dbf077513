"""Tests for the playback selector and UI state projector."""

from datetime import datetime

from conftest import make_song
from models.events import EventKind, VoteEvent
from services.playback_selector import PlaybackSelector
from services.ui_state import UIStateProjector


def event(kind, song_id="a", leader=None, roster=()):
    return VoteEvent(kind=kind, song_id=song_id, new_vote_count=1, leader=leader, roster=tuple(roster))


class TestPlaybackSelector:
    def test_starts_idle(self):
        player = PlaybackSelector()

        assert player.currently_playing is None
        assert player.get_current_playing() == {"song": None, "is_playing": False}

    def test_vote_change_moves_idle_to_playing(self):
        switches = []
        player = PlaybackSelector(on_change=switches.append)
        a = make_song("a", votes=3)

        player.on_event(event(EventKind.VOTE_CHANGE, leader=a))

        assert player.currently_playing is a
        assert player.is_playing
        assert switches == [a]

    def test_vote_change_to_new_leader_switches(self):
        switches = []
        player = PlaybackSelector(on_change=switches.append)
        a, b = make_song("a"), make_song("b")

        player.on_event(event(EventKind.VOTE_CHANGE, leader=a))
        player.on_event(event(EventKind.VOTE_CHANGE, leader=b))

        assert player.currently_playing.id == "b"
        assert [s.id for s in switches] == ["a", "b"]

    def test_vote_change_to_same_leader_is_ignored(self):
        switches = []
        player = PlaybackSelector(on_change=switches.append)
        a = make_song("a")

        player.on_event(event(EventKind.VOTE_CHANGE, leader=a))
        player.on_event(event(EventKind.VOTE_CHANGE, leader=make_song("a", votes=9)))

        assert len(switches) == 1

    def test_vote_change_without_leader_keeps_state(self):
        player = PlaybackSelector()

        player.on_event(event(EventKind.VOTE_CHANGE, leader=None))

        assert player.currently_playing is None

    def test_update_and_added_do_not_switch(self):
        player = PlaybackSelector()
        a, b = make_song("a"), make_song("b")
        player.on_event(event(EventKind.VOTE_CHANGE, leader=a))

        player.on_event(event(EventKind.VOTE_UPDATE, leader=b))
        player.on_event(event(EventKind.SONG_ADDED, song_id="b", leader=b))

        assert player.currently_playing is a

    def test_removal_of_playing_song_switches_to_leader(self):
        player = PlaybackSelector()
        a, b = make_song("a"), make_song("b")
        player.on_event(event(EventKind.VOTE_CHANGE, leader=a))

        player.on_event(event(EventKind.SONG_REMOVED, song_id="a", leader=b))

        assert player.currently_playing is b

    def test_removal_of_last_song_goes_idle(self):
        switches = []
        player = PlaybackSelector(on_change=switches.append)
        player.on_event(event(EventKind.VOTE_CHANGE, leader=make_song("a")))

        player.on_event(event(EventKind.SONG_REMOVED, song_id="a", leader=None))

        assert player.currently_playing is None
        assert switches[-1] is None

    def test_removal_of_other_song_is_ignored(self):
        player = PlaybackSelector()
        a = make_song("a")
        player.on_event(event(EventKind.VOTE_CHANGE, leader=a))

        player.on_event(event(EventKind.SONG_REMOVED, song_id="zzz", leader=a))

        assert player.currently_playing is a

    def test_playing_song_tracks_latest_votes(self):
        player = PlaybackSelector()
        player.on_event(event(EventKind.VOTE_CHANGE, leader=make_song("a", votes=3)))
        newer = make_song("a", votes=5)

        player.on_event(event(EventKind.VOTE_UPDATE, leader=newer, roster=[newer, make_song("b")]))

        assert player.currently_playing is newer
        assert player.get_current_playing()["song"]["votes"] == 5

    def test_failing_listener_does_not_block_others(self):
        def broken(song):
            raise RuntimeError("listener down")

        switches = []
        player = PlaybackSelector(on_change=broken)
        player.add_listener(switches.append)
        a = make_song("a")

        player.on_event(event(EventKind.VOTE_CHANGE, leader=a))

        assert player.currently_playing is a
        assert switches == [a]


class TestUIStateProjector:
    def test_initial_state_is_empty(self):
        state = UIStateProjector().get_state()

        assert state.roster == ()
        assert state.leader is None
        assert state.last_update is None

    def test_replaces_roster_and_leader(self):
        stamp = datetime(2024, 6, 1, 12, 0)
        ui = UIStateProjector(clock=lambda: stamp)
        a, b = make_song("a", votes=2), make_song("b", votes=1)

        ui.on_event(event(EventKind.VOTE_CHANGE, leader=a, roster=[a, b]))
        state = ui.get_state()

        assert state.roster == (a, b)
        assert state.leader is a
        assert state.last_update == stamp

    def test_event_without_leader_keeps_previous_leader(self):
        ui = UIStateProjector()
        a, b = make_song("a", votes=2), make_song("b")
        ui.on_event(event(EventKind.VOTE_CHANGE, leader=a, roster=[a]))

        ui.on_event(event(EventKind.SONG_ADDED, song_id="b", leader=None, roster=[a, b]))

        assert ui.get_state().leader is a
        assert len(ui.get_state().roster) == 2

    def test_removing_last_song_clears_leader(self):
        ui = UIStateProjector()
        a = make_song("a", votes=2)
        ui.on_event(event(EventKind.VOTE_CHANGE, leader=a, roster=[a]))

        ui.on_event(event(EventKind.SONG_REMOVED, song_id="a", leader=None, roster=[]))

        assert ui.get_state().roster == ()
        assert ui.get_state().leader is None

    def test_get_state_is_pure(self):
        ui = UIStateProjector()
        ui.on_event(event(EventKind.VOTE_UPDATE, roster=[make_song("a")]))

        assert ui.get_state() is ui.get_state()

    def test_to_dict(self):
        ui = UIStateProjector(clock=lambda: datetime(2024, 1, 1))
        a = make_song("a", votes=2)
        ui.on_event(event(EventKind.VOTE_CHANGE, leader=a, roster=[a]))

        data = ui.get_state().to_dict()

        assert data["highest_voted"]["id"] == "a"
        assert [s["id"] for s in data["songs"]] == ["a"]
        assert data["last_update"] == "2024-01-01T00:00:00"
