"""
Song data model.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Tuple


@dataclass
class Song:
    """A song in the voting roster."""

    id: str
    title: str
    artist: str
    album: str = ""
    audio_ref: str = ""
    cover_ref: Optional[str] = None
    votes: int = 0
    added_at: datetime = field(default_factory=datetime.now)
    year: Optional[int] = None
    added_by: Optional[str] = None  # Chat user who requested it, if any

    @property
    def key(self) -> Tuple[str, str]:
        """Normalized (title, artist) pair used for duplicate detection."""
        return self.title.strip().lower(), self.artist.strip().lower()

    @property
    def has_placeholder_cover(self) -> bool:
        """True if the cover is missing or a generated placeholder."""
        return not self.cover_ref or "placeholder" in self.cover_ref

    def snapshot(self) -> "Song":
        """Return a detached copy for events and read models."""
        return replace(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "audio_ref": self.audio_ref,
            "cover_ref": self.cover_ref,
            "votes": self.votes,
            "added_at": self.added_at.isoformat(),
            "year": self.year,
            "added_by": self.added_by,
        }
