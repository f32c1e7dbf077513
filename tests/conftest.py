"""
Shared fixtures: fresh service instances per test.
"""

from datetime import datetime, timedelta
from typing import List

import pytest

from config.settings import Settings
from models.events import VoteEvent
from models.song import Song
from services.notification_bus import NotificationBus
from services.song_store import SongStore
from services.vote_ledger import VoteLedger


class FakeClock:
    """Clock that advances one second per call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


class RecordingConsumer:
    """Consumer that records every event it receives."""

    def __init__(self):
        self.events: List[VoteEvent] = []

    def on_event(self, event: VoteEvent) -> None:
        self.events.append(event)

    @property
    def kinds(self) -> List[str]:
        return [e.kind.value for e in self.events]


def make_song(song_id: str, votes: int = 0, title: str = None, artist: str = "Artist") -> Song:
    return Song(
        id=song_id,
        title=title or f"Song {song_id}",
        artist=artist,
        audio_ref=f"https://cdn.example/{song_id}.mp3",
        votes=votes,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SongStore(max_songs=12, clock=clock)


@pytest.fixture
def bus():
    return NotificationBus()


@pytest.fixture
def recorder(bus):
    consumer = RecordingConsumer()
    bus.subscribe(consumer)
    return consumer


@pytest.fixture
def ledger(store, bus):
    return VoteLedger(store, bus)


@pytest.fixture
def seeded_ledger(ledger):
    """Ledger over roster a(5), b(8) with b as the established leader."""
    ledger.store.add(make_song("a", votes=5))
    ledger.store.add(make_song("b", votes=8))
    ledger.announce_leader()
    return ledger


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        seed_roster=True,
        cover_lookup_enabled=False,
        session_log_enabled=False,
        session_logs_dir=str(tmp_path / "sessions"),
        frontend_dir=str(tmp_path / "no-frontend"),
        _env_file=None,
    )
