"""
Voting service.
Entry point used by the API: votes, super votes and roster changes.
"""

import logging
import re
import uuid
from typing import Optional, Tuple

from models.events import VoteEvent
from models.roster import PREVIEW_AUDIO_REF
from models.song import Song
from .errors import NotFoundError
from .notification_bus import NotificationBus
from .playback_selector import PlaybackSelector
from .song_store import SongStore
from .super_vote import SuperVoteCalculator
from .ui_state import UIStateProjector
from .vote_ledger import VoteLedger

logger = logging.getLogger(__name__)


def make_song_id(artist: str, title: str) -> str:
    """Build a readable unique id like 'gorillaz-dare-3f2a1c'."""
    slug = re.sub(r"[^a-z0-9]+", "-", f"{artist} {title}".lower()).strip("-")
    return f"{slug[:48]}-{uuid.uuid4().hex[:6]}"


class VotingService:
    """
    Wires the store, ledger, bus and built-in consumers together.
    Constructed once per process (or per test).
    """

    def __init__(self, max_songs: int = 12):
        """
        Initialize the voting service.

        Args:
            max_songs: Maximum songs in the roster
        """
        self.store = SongStore(max_songs=max_songs)
        self.bus = NotificationBus()
        self.ledger = VoteLedger(self.store, self.bus)
        self.player = PlaybackSelector()
        self.ui = UIStateProjector()
        self.calculator = SuperVoteCalculator()

        self.bus.subscribe(self.player)
        self.bus.subscribe(self.ui)

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def seed(self, songs) -> Optional[VoteEvent]:
        """
        Load an initial roster and announce its leader.

        Returns:
            The initial VOTE_CHANGE event, or None for an empty roster
        """
        with self.ledger.lock:
            for song in songs:
                self.store.add(song)
            logger.info(f"Loaded {len(self.store)} songs")
            return self.ledger.announce_leader()

    # -------------------------------------------------------------------------
    # Voting
    # -------------------------------------------------------------------------

    def vote(self, song_id: str) -> VoteEvent:
        """
        Add one vote to a song.

        Raises:
            NotFoundError: Unknown song id
        """
        with self.ledger.lock:
            song = self.store.get(song_id)
            if song is None:
                raise NotFoundError(song_id)
            return self.ledger.register_vote(song_id, song.votes + 1)

    def super_vote(self, song_id: str) -> Tuple[VoteEvent, int]:
        """
        Add exactly enough votes to put a song in the lead.

        Returns:
            Tuple of (VoteEvent, votes_added)

        Raises:
            NotFoundError: Unknown song id
        """
        with self.ledger.lock:
            # Reference is the whole roster, not the playing song: a song added
            # with votes can outrank the playing song until the next vote.
            votes_added = self.calculator.compute_boost(song_id, self.store.all())
            song = self.store.get(song_id)
            event = self.ledger.register_vote(song_id, song.votes + votes_added)
            logger.info(f"Super vote: '{song.title}' +{votes_added} -> {song.votes} votes")
            return event, votes_added

    # -------------------------------------------------------------------------
    # Roster
    # -------------------------------------------------------------------------

    def add_song(
        self,
        title: str,
        artist: str,
        album: str = "",
        audio_ref: Optional[str] = None,
        cover_ref: Optional[str] = None,
        added_by: Optional[str] = None,
        votes: int = 0,
        year: Optional[int] = None,
    ) -> Song:
        """
        Create and add a song.

        Raises:
            DuplicateError: Same title and artist already present
        """
        song = Song(
            id=make_song_id(artist, title),
            title=title.strip(),
            artist=artist.strip(),
            album=album,
            audio_ref=audio_ref or PREVIEW_AUDIO_REF,
            cover_ref=cover_ref,
            votes=votes,
            year=year,
            added_by=added_by,
        )
        self.ledger.add_song(song)
        return song

    def remove_song(self, song_id: str) -> VoteEvent:
        """
        Remove a song.

        Raises:
            NotFoundError: Unknown song id
        """
        return self.ledger.remove_song(song_id)

    def get_song(self, song_id: str) -> Song:
        """
        Get a song by id.

        Raises:
            NotFoundError: Unknown song id
        """
        song = self.store.get(song_id)
        if song is None:
            raise NotFoundError(song_id)
        return song

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    def overview(self) -> dict:
        """Full state for GET /api/songs."""
        with self.ledger.lock:
            leader = self.ledger.get_leader()
            return {
                "songs": [song.to_dict() for song in self.ledger.sorted_roster()],
                "highest_voted": leader.to_dict() if leader else None,
                "total_songs": len(self.store),
                "max_songs": self.store.max_songs,
                "current_playing": self.player.get_current_playing(),
                "ui_state": self.ui.get_state().to_dict(),
            }

    def player_state(self) -> dict:
        """Playback state for GET /api/player."""
        leader = self.ledger.get_leader()
        return {
            "current_playing": self.player.get_current_playing(),
            "highest_voted": leader.to_dict() if leader else None,
        }
