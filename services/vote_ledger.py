"""
Vote ledger.
Records vote counts, tracks the current leader, and publishes vote events.
"""

import logging
import threading
from typing import List, Optional

from models.events import EventKind, VoteEvent
from models.song import Song
from .errors import InvalidVoteError, NotFoundError
from .notification_bus import NotificationBus
from .song_store import SongStore

logger = logging.getLogger(__name__)


class VoteLedger:
    """
    Owns the leader state and is the only publisher on the bus.

    Leader is the song with the most votes; ties go to the earliest-added
    song. Every mutation runs compute, commit and publish under one lock.
    """

    def __init__(self, store: SongStore, bus: NotificationBus):
        """
        Initialize the ledger.

        Args:
            store: Roster the ledger votes over
            bus: Bus to publish vote events on
        """
        self.store = store
        self.bus = bus
        self.lock = threading.RLock()
        self._leader_id: Optional[str] = None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_leader(self) -> Optional[Song]:
        """Get the current leader, or None if the roster is empty."""
        with self.lock:
            if self._leader_id is None:
                return None
            return self.store.get(self._leader_id)

    def sorted_roster(self) -> List[Song]:
        """Songs by votes descending, ties kept in roster order."""
        with self.lock:
            return sorted(self.store.all(), key=lambda s: -s.votes)

    def _compute_leader(self) -> Optional[Song]:
        songs = self.store.all()
        if not songs:
            return None
        return min(songs, key=lambda s: (-s.votes, s.added_at))

    def _build_event(self, kind: EventKind, song_id: str, new_vote_count: Optional[int]) -> VoteEvent:
        leader = self.get_leader()
        return VoteEvent(
            kind=kind,
            song_id=song_id,
            new_vote_count=new_vote_count,
            leader=leader.snapshot() if leader else None,
            roster=tuple(song.snapshot() for song in self.sorted_roster()),
        )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def register_vote(self, song_id: str, new_vote_count: int) -> VoteEvent:
        """
        Set a song's vote count and re-evaluate the leader.

        The count is absolute; callers compute the increment.

        Returns:
            The published VOTE_CHANGE (leader changed) or VOTE_UPDATE event

        Raises:
            NotFoundError: Unknown song id
            InvalidVoteError: Negative or non-integer count
        """
        if isinstance(new_vote_count, bool) or not isinstance(new_vote_count, int) or new_vote_count < 0:
            raise InvalidVoteError(new_vote_count)

        with self.lock:
            song = self.store.get(song_id)
            if song is None:
                raise NotFoundError(song_id)

            song.votes = new_vote_count
            logger.info(f"Vote registered for '{song.title}' - total: {song.votes} votes")

            leader = self._compute_leader()
            new_leader_id = leader.id if leader else None
            if new_leader_id != self._leader_id:
                self._leader_id = new_leader_id
                kind = EventKind.VOTE_CHANGE
                logger.info(f"New leader: '{leader.title}' by {leader.artist} ({leader.votes} votes)")
            else:
                kind = EventKind.VOTE_UPDATE

            event = self._build_event(kind, song_id, new_vote_count)
            self.bus.publish(event)
            return event

    def add_song(self, song: Song) -> VoteEvent:
        """
        Add a song to the roster and publish SONG_ADDED.

        Leadership is not re-evaluated here, unless there was no leader
        or the leader was just evicted to make room.

        Raises:
            DuplicateError: Same title and artist already present
        """
        with self.lock:
            self.store.add(song)
            if self._leader_id is None or self._leader_id not in self.store:
                leader = self._compute_leader()
                self._leader_id = leader.id if leader else None
                if leader:
                    logger.info(f"Leader recomputed after roster change: '{leader.title}'")

            event = self._build_event(EventKind.SONG_ADDED, song.id, song.votes)
            self.bus.publish(event)
            return event

    def remove_song(self, song_id: str) -> VoteEvent:
        """
        Remove a song and publish SONG_REMOVED.
        Leadership is recomputed if the leader was removed.

        Raises:
            NotFoundError: Unknown song id
        """
        with self.lock:
            removed = self.store.remove(song_id)
            if removed.id == self._leader_id:
                leader = self._compute_leader()
                self._leader_id = leader.id if leader else None
                logger.info(f"Leader removed; new leader: {leader.title if leader else 'none'}")

            event = self._build_event(EventKind.SONG_REMOVED, song_id, None)
            self.bus.publish(event)
            return event

    def announce_leader(self) -> Optional[VoteEvent]:
        """
        Establish the leader of the current roster and publish VOTE_CHANGE.
        Called once at startup after seeding.

        Returns:
            The published event, or None if the roster is empty
        """
        with self.lock:
            leader = self._compute_leader()
            if leader is None:
                return None
            self._leader_id = leader.id
            logger.info(f"Initial leader: '{leader.title}' by {leader.artist} ({leader.votes} votes)")
            event = self._build_event(EventKind.VOTE_CHANGE, leader.id, leader.votes)
            self.bus.publish(event)
            return event
