"""Services module for the PlayOff voting system."""

from .errors import (
    VotingError,
    NotFoundError,
    DuplicateError,
    CapacityError,
    InvalidVoteError,
    InvalidMessageError,
    ConsumerNotificationError,
)
from .song_store import SongStore
from .notification_bus import NotificationBus, EventConsumer
from .vote_ledger import VoteLedger
from .playback_selector import PlaybackSelector
from .ui_state import UIState, UIStateProjector
from .super_vote import SuperVoteCalculator
from .voting_service import VotingService
from .chat_service import ChatService
from .cover_art_service import CoverArtService, placeholder_cover
from .session_logger import SessionLogger

__all__ = [
    "VotingError",
    "NotFoundError",
    "DuplicateError",
    "CapacityError",
    "InvalidVoteError",
    "InvalidMessageError",
    "ConsumerNotificationError",
    "SongStore",
    "NotificationBus",
    "EventConsumer",
    "VoteLedger",
    "PlaybackSelector",
    "UIState",
    "UIStateProjector",
    "SuperVoteCalculator",
    "VotingService",
    "ChatService",
    "CoverArtService",
    "placeholder_cover",
    "SessionLogger",
]
