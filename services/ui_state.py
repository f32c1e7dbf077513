"""
UI state read model, kept current from vote events.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Tuple

from models.events import EventKind, VoteEvent
from models.song import Song

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UIState:
    """Denormalized state for clients."""

    roster: Tuple[Song, ...] = ()
    leader: Optional[Song] = None
    last_update: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "songs": [song.to_dict() for song in self.roster],
            "highest_voted": self.leader.to_dict() if self.leader else None,
            "last_update": self.last_update.isoformat() if self.last_update else None,
        }


class UIStateProjector:
    """Replaces its state with each event's snapshot."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._state = UIState()

    def on_event(self, event: VoteEvent) -> None:
        if event.kind == EventKind.SONG_REMOVED or event.leader is not None:
            leader = event.leader
        else:
            leader = self._state.leader
        self._state = UIState(
            roster=event.roster,
            leader=leader,
            last_update=self._clock(),
        )
        logger.debug(f"UI state updated ({event.kind.value}, {len(event.roster)} songs)")

    def get_state(self) -> UIState:
        return self._state
