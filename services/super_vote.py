"""
Super vote sizing.
"""

import logging
from typing import Iterable, Optional

from models.song import Song
from .errors import NotFoundError

logger = logging.getLogger(__name__)


class SuperVoteCalculator:
    """Computes how many votes a song needs to take the lead."""

    def compute_boost(
        self,
        target_song_id: str,
        roster: Iterable[Song],
        current_playing_song_id: Optional[str] = None,
    ) -> int:
        """
        Compute the votes to add so the target overtakes the reference song.

        The reference is the currently playing song when given (and not the
        target); otherwise the highest-voted other song.

        Args:
            target_song_id: Song to boost
            roster: Current roster
            current_playing_song_id: Song now playing, if any

        Returns:
            Votes needed (at least 1)

        Raises:
            NotFoundError: Target not in roster
        """
        songs = list(roster)
        target = next((s for s in songs if s.id == target_song_id), None)
        if target is None:
            raise NotFoundError(target_song_id)

        reference_song = None
        if current_playing_song_id and current_playing_song_id != target_song_id:
            reference_song = next((s for s in songs if s.id == current_playing_song_id), None)

        if reference_song is not None:
            reference = reference_song.votes
        else:
            reference = max((s.votes for s in songs if s.id != target_song_id), default=0)

        votes_needed = max(1, (reference + 1) - target.votes)
        logger.debug(
            f"Super vote for '{target.title}': has {target.votes}, "
            f"reference {reference}, needs {votes_needed}"
        )
        return votes_needed
