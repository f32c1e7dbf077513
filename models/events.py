"""
Vote events dispatched by the ledger, and WebSocket event models
for real-time client updates.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Optional, Tuple
import json

from .song import Song


class EventKind(str, Enum):
    """Kinds of vote/roster events."""

    VOTE_UPDATE = "VOTE_UPDATE"  # votes changed, same leader
    VOTE_CHANGE = "VOTE_CHANGE"  # leader changed
    SONG_ADDED = "SONG_ADDED"
    SONG_REMOVED = "SONG_REMOVED"


@dataclass(frozen=True)
class VoteEvent:
    """
    A vote or roster change.
    Carries the full sorted roster snapshot so consumers never re-query.
    """

    kind: EventKind
    song_id: str
    new_vote_count: Optional[int]
    leader: Optional[Song]
    roster: Tuple[Song, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "song_id": self.song_id,
            "new_vote_count": self.new_vote_count,
            "leader": self.leader.to_dict() if self.leader else None,
            "roster": [song.to_dict() for song in self.roster],
        }


@dataclass
class WebSocketEvent:
    """Base class for WebSocket events."""

    event_type: str

    def to_json(self) -> str:
        """Serialize event to JSON string."""
        return json.dumps(asdict(self))

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class RosterUpdateEvent(WebSocketEvent):
    """
    Sent after every vote or roster change.
    Used by clients to redraw the leaderboard.
    """

    event_type: str = "roster_update"
    kind: str = ""
    song_id: str = ""
    new_vote_count: Optional[int] = None
    leader: Optional[dict] = None
    songs: List[dict] = field(default_factory=list)

    @classmethod
    def from_vote_event(cls, event: VoteEvent) -> "RosterUpdateEvent":
        """Create event from a ledger VoteEvent."""
        data = event.to_dict()
        return cls(
            kind=data["kind"],
            song_id=data["song_id"],
            new_vote_count=data["new_vote_count"],
            leader=data["leader"],
            songs=data["roster"],
        )


@dataclass
class NowPlayingEvent(WebSocketEvent):
    """
    Sent when the playback selector switches songs.
    The browser audio element loads audio_ref from here.
    """

    event_type: str = "now_playing"
    song: Optional[dict] = None
    is_playing: bool = False


@dataclass
class ChatMessageEvent(WebSocketEvent):
    """Sent when a chat message is posted (by a user or the bot)."""

    event_type: str = "chat_message"
    user: str = ""
    message: str = ""
    timestamp: str = ""


@dataclass
class CoverUpdateEvent(WebSocketEvent):
    """Sent when cover enrichment resolves a cover for a song."""

    event_type: str = "cover_update"
    song_id: str = ""
    cover_ref: str = ""
    album: str = ""


@dataclass
class ConnectionEvent(WebSocketEvent):
    """
    Sent when a client connects.
    Provides initial state.
    """

    event_type: str = "connected"
    total_songs: int = 0
    max_songs: int = 12
    current_playing: Optional[dict] = None
    server_version: str = "1.0.0"
