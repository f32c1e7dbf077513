"""
Playback selector.
Treats the current vote leader as the song that is playing.
"""

import logging
from typing import Callable, List, Optional

from models.events import EventKind, VoteEvent
from models.song import Song

logger = logging.getLogger(__name__)


class PlaybackSelector:
    """
    Idle / Playing(song) state machine driven by leader changes.

    Only updates state; the browser audio element (or any other player)
    observes currently_playing and does the actual playback.
    """

    def __init__(self, on_change: Optional[Callable[[Optional[Song]], None]] = None):
        """
        Initialize the selector.

        Args:
            on_change: Called with the new song (or None for Idle) after each switch
        """
        self.currently_playing: Optional[Song] = None
        self._listeners: List[Callable[[Optional[Song]], None]] = []
        if on_change:
            self._listeners.append(on_change)

    def add_listener(self, listener: Callable[[Optional[Song]], None]) -> None:
        """Register a callback fired after every playback switch."""
        self._listeners.append(listener)

    @property
    def is_playing(self) -> bool:
        """True unless Idle."""
        return self.currently_playing is not None

    def on_event(self, event: VoteEvent) -> None:
        """Handle a vote event."""
        self._refresh(event.roster)

        if event.kind == EventKind.VOTE_CHANGE:
            if event.leader is not None and not self._is_current(event.leader.id):
                logger.info(f"Switching to new leader: '{event.leader.title}'")
                self._switch(event.leader)
        elif event.kind == EventKind.SONG_REMOVED:
            if self._is_current(event.song_id):
                logger.info("Playing song was removed from the roster")
                self._switch(event.leader)
        else:
            logger.debug(
                f"{event.kind.value} for {event.song_id}; "
                f"still playing {self.currently_playing.title if self.currently_playing else 'nothing'}"
            )

    def _refresh(self, roster) -> None:
        # Pick up the latest vote count of the playing song without a switch
        if self.currently_playing is None:
            return
        for song in roster:
            if song.id == self.currently_playing.id:
                self.currently_playing = song
                return

    def _is_current(self, song_id: str) -> bool:
        return self.currently_playing is not None and self.currently_playing.id == song_id

    def _switch(self, song: Optional[Song]) -> None:
        self.currently_playing = song
        if song:
            logger.info(f"Now playing '{song.title}' by {song.artist} ({song.audio_ref})")
        else:
            logger.info("Playback idle")

        for listener in self._listeners:
            try:
                listener(song)
            except Exception as e:
                logger.error(f"Playback listener {getattr(listener, '__name__', listener)} failed: {e}", exc_info=e)

    def get_current_playing(self) -> dict:
        """Current playback state for the API."""
        return {
            "song": self.currently_playing.to_dict() if self.currently_playing else None,
            "is_playing": self.is_playing,
        }
