"""
Chat message and chat command models.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ChatMessage:
    """A message in the chat channel."""

    user: str
    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "user": self.user,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class SongCommand:
    """A song request parsed from a chat message ("add Artist - Title")."""

    artist: str
    title: str
    requested_by: str
