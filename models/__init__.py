"""Data models for the PlayOff voting system."""

from .song import Song
from .chat import ChatMessage, SongCommand
from .roster import default_roster, PREVIEW_AUDIO_REF
from .events import (
    EventKind,
    VoteEvent,
    WebSocketEvent,
    RosterUpdateEvent,
    NowPlayingEvent,
    ChatMessageEvent,
    CoverUpdateEvent,
    ConnectionEvent,
)

__all__ = [
    "Song",
    "ChatMessage",
    "SongCommand",
    "default_roster",
    "PREVIEW_AUDIO_REF",
    "EventKind",
    "VoteEvent",
    "WebSocketEvent",
    "RosterUpdateEvent",
    "NowPlayingEvent",
    "ChatMessageEvent",
    "CoverUpdateEvent",
    "ConnectionEvent",
]
