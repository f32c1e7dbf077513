"""
In-memory song roster.
Bounded to a maximum size; overflow evicts the lowest-voted, oldest songs.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from models.song import Song
from .errors import DuplicateError, NotFoundError

logger = logging.getLogger(__name__)


class SongStore:
    """
    Owns the roster of votable songs.
    Roster order is insertion order; consumers may re-sort.
    """

    def __init__(self, max_songs: int = 12, clock: Callable[[], datetime] = datetime.now):
        """
        Initialize the store.

        Args:
            max_songs: Maximum songs kept in the roster
            clock: Source of added_at timestamps
        """
        if max_songs < 1:
            raise ValueError("max_songs must be at least 1")
        self.max_songs = max_songs
        self._clock = clock
        self._songs: List[Song] = []
        self._by_id: Dict[str, Song] = {}
        self.last_evicted: List[Song] = []

    def add(self, song: Song) -> Song:
        """
        Add a song to the roster.

        Returns:
            The stored song (with added_at stamped)

        Raises:
            DuplicateError: Same title and artist already present
        """
        key = song.key
        if song.id in self._by_id or any(s.key == key for s in self._songs):
            raise DuplicateError(song.title, song.artist)

        song.added_at = self._clock()
        self._songs.append(song)
        self._by_id[song.id] = song
        logger.info(f"Added song: '{song.title}' by {song.artist} ({song.votes} votes)")

        self.last_evicted = self._evict_surplus()
        return song

    def _evict_surplus(self) -> List[Song]:
        """Drop the lowest-voted, oldest songs until the roster fits."""
        surplus = len(self._songs) - self.max_songs
        if surplus <= 0:
            return []

        by_priority = sorted(self._songs, key=lambda s: (s.votes, s.added_at))
        evicted = by_priority[:surplus]
        for song in evicted:
            self._songs.remove(song)
            del self._by_id[song.id]
            logger.info(
                f"Evicted '{song.title}' ({song.votes} votes) "
                f"to keep the {self.max_songs} song limit"
            )
        return evicted

    def remove(self, song_id: str) -> Song:
        """
        Remove a song by id.

        Raises:
            NotFoundError: Unknown song id
        """
        song = self._by_id.pop(song_id, None)
        if song is None:
            raise NotFoundError(song_id)
        self._songs.remove(song)
        logger.info(f"Removed song: '{song.title}'")
        return song

    def get(self, song_id: str) -> Optional[Song]:
        """Get a song by id, or None."""
        return self._by_id.get(song_id)

    def all(self) -> List[Song]:
        """All songs in insertion order."""
        return list(self._songs)

    def update_cover(self, song_id: str, cover_ref: str, album: Optional[str] = None) -> Song:
        """
        Write an enrichment result back into a song.
        Separate from the vote path; never touches votes.

        Raises:
            NotFoundError: Song was removed or evicted meanwhile
        """
        song = self._by_id.get(song_id)
        if song is None:
            raise NotFoundError(song_id)
        song.cover_ref = cover_ref
        if album:
            song.album = album
        logger.debug(f"Updated cover for '{song.title}'")
        return song

    def __len__(self) -> int:
        return len(self._songs)

    def __contains__(self, song_id: object) -> bool:
        return song_id in self._by_id
