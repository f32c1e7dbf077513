"""
Chat service.
Keeps a bounded message log and detects song commands in messages.
"""

import logging
import re
from collections import deque
from datetime import datetime
from typing import Deque, List, Optional, Tuple

from models.chat import ChatMessage, SongCommand
from .errors import InvalidMessageError

logger = logging.getLogger(__name__)

BOT_NAME = "DJ Bot"
ANONYMOUS = "Anonymous"

_VERBS = r"(?:add|adicionar|música|musica|music|tocar|play)"


class ChatService:
    """In-memory chat channel."""

    # "add Artist - Title", "Artist - Title add", "search Artist - Title"
    COMMAND_PATTERNS = [
        re.compile(rf"^{_VERBS}\s+(.+?)\s*-\s*(.+)$", re.IGNORECASE),
        re.compile(rf"^(.+?)\s*-\s*(.+?)\s*{_VERBS}$", re.IGNORECASE),
        re.compile(r"^(?:buscar|search)\s+(.+?)\s*-\s*(.+)$", re.IGNORECASE),
    ]

    # Words that suggest the user wants to add a song but didn't use a command
    HINT_KEYWORDS = ("música", "music", "song", "som", "tocar", "play", "add")

    HINT_MESSAGE = 'To add a song, type: "add Artist - Title" (e.g. "add The Beatles - Hey Jude")'

    def __init__(self, retention: int = 100, history_limit: int = 20):
        """
        Initialize chat service.

        Args:
            retention: Messages kept in memory
            history_limit: Default number of messages returned by recent()
        """
        self.history_limit = history_limit
        self._messages: Deque[ChatMessage] = deque(maxlen=retention)
        self.total_messages = 0  # Ever posted, including ones dropped by retention
        self.bot_say("Welcome to PlayOff! Vote for your favorite songs!")

    def _append(self, message: ChatMessage) -> None:
        self._messages.append(message)
        self.total_messages += 1

    def post(
        self,
        user: Optional[str],
        message: str,
        timestamp: Optional[datetime] = None,
    ) -> Tuple[ChatMessage, Optional[SongCommand]]:
        """
        Post a user message.

        Returns:
            Tuple of (stored message, parsed song command or None)

        Raises:
            InvalidMessageError: Empty message
        """
        text = (message or "").strip()
        if not text:
            raise InvalidMessageError()

        user = (user or "").strip() or ANONYMOUS
        chat_message = ChatMessage(user=user, message=text, timestamp=timestamp or datetime.now())
        self._append(chat_message)
        logger.info(f"Chat message from {user}: {text}")

        command = self.detect_command(text, user)
        if command:
            logger.info(f"Song command detected: {command.artist} - {command.title}")
        elif any(word in text.lower() for word in self.HINT_KEYWORDS):
            self.bot_say(self.HINT_MESSAGE)

        return chat_message, command

    def detect_command(self, text: str, requested_by: str = ANONYMOUS) -> Optional[SongCommand]:
        """Parse a song command out of a message, if present."""
        for pattern in self.COMMAND_PATTERNS:
            match = pattern.match(text.strip())
            if match and match.group(1).strip() and match.group(2).strip():
                return SongCommand(
                    artist=match.group(1).strip(),
                    title=match.group(2).strip(),
                    requested_by=requested_by,
                )
        return None

    def bot_say(self, text: str) -> ChatMessage:
        """Append a bot message."""
        message = ChatMessage(user=BOT_NAME, message=text)
        self._append(message)
        return message

    def recent(self, limit: Optional[int] = None) -> List[ChatMessage]:
        """Most recent messages, oldest first."""
        limit = limit or self.history_limit
        return list(self._messages)[-limit:]

    def since(self, mark: int) -> List[ChatMessage]:
        """Messages posted after total_messages was `mark`, still retained."""
        count = min(self.total_messages - mark, len(self._messages))
        if count <= 0:
            return []
        return list(self._messages)[-count:]

    def __len__(self) -> int:
        return len(self._messages)
