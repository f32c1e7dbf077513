"""Tests for super vote sizing."""

import random

import pytest

from conftest import FakeClock, make_song
from services.errors import NotFoundError
from services.notification_bus import NotificationBus
from services.song_store import SongStore
from services.super_vote import SuperVoteCalculator
from services.vote_ledger import VoteLedger


@pytest.fixture
def calculator():
    return SuperVoteCalculator()


class TestComputeBoost:
    def test_overtakes_highest_other_song(self, calculator):
        roster = [make_song("c", votes=2), make_song("d", votes=10)]

        assert calculator.compute_boost("c", roster) == 9

    def test_at_least_one_vote_when_already_leading(self, calculator):
        roster = [make_song("c", votes=20), make_song("d", votes=10)]

        assert calculator.compute_boost("c", roster) == 1

    def test_only_song_in_roster(self, calculator):
        assert calculator.compute_boost("c", [make_song("c", votes=0)]) == 1
        assert calculator.compute_boost("c", [make_song("c", votes=7)]) == 1

    def test_uses_current_playing_song_as_reference(self, calculator):
        roster = [make_song("c", votes=2), make_song("d", votes=10), make_song("p", votes=4)]

        assert calculator.compute_boost("c", roster, current_playing_song_id="p") == 3

    def test_current_playing_equal_to_target_falls_back_to_max(self, calculator):
        roster = [make_song("c", votes=2), make_song("d", votes=10)]

        assert calculator.compute_boost("c", roster, current_playing_song_id="c") == 9

    def test_current_playing_not_in_roster_falls_back_to_max(self, calculator):
        roster = [make_song("c", votes=2), make_song("d", votes=10)]

        assert calculator.compute_boost("c", roster, current_playing_song_id="evicted") == 9

    def test_unknown_target_raises(self, calculator):
        with pytest.raises(NotFoundError):
            calculator.compute_boost("zzz", [make_song("c")])


def test_boost_then_register_makes_target_leader(calculator):
    rng = random.Random(7)
    for _ in range(50):
        store = SongStore(max_songs=12, clock=FakeClock())
        ledger = VoteLedger(store, NotificationBus())
        for i in range(rng.randrange(1, 10)):
            store.add(make_song(f"s{i}", votes=rng.randrange(15)))
        ledger.announce_leader()
        target = rng.choice(store.all())

        boost = calculator.compute_boost(target.id, store.all())
        ledger.register_vote(target.id, target.votes + boost)

        assert ledger.get_leader().id == target.id
