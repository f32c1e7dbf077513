"""
WebSocket connection manager for real-time client updates.
"""

import asyncio
import logging
from typing import Coroutine, List, Optional, Set
from fastapi import WebSocket

from models.chat import ChatMessage
from models.events import (
    WebSocketEvent,
    ConnectionEvent,
    RosterUpdateEvent,
    NowPlayingEvent,
    ChatMessageEvent,
    CoverUpdateEvent,
    VoteEvent,
)
from models.song import Song

logger = logging.getLogger(__name__)


class WebSocketManager:
    """
    Manages WebSocket connections and broadcasts events to all clients.
    """

    def __init__(self):
        """Initialize the WebSocket manager."""
        self.active_connections: List[WebSocket] = []
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        """
        Accept a new WebSocket connection.

        Args:
            websocket: The WebSocket connection to accept
        """
        await websocket.accept()

        async with self._lock:
            self.active_connections.append(websocket)

        logger.info(f"WebSocket connected. Total connections: {len(self.active_connections)}")

    async def disconnect(self, websocket: WebSocket) -> None:
        """
        Remove a WebSocket connection.

        Args:
            websocket: The WebSocket connection to remove
        """
        async with self._lock:
            if websocket in self.active_connections:
                self.active_connections.remove(websocket)

        logger.info(f"WebSocket disconnected. Total connections: {len(self.active_connections)}")

    async def send_personal(self, websocket: WebSocket, event: WebSocketEvent) -> bool:
        """
        Send an event to a specific client.

        Returns:
            True if sent successfully, False otherwise
        """
        try:
            await websocket.send_text(event.to_json())
            return True
        except Exception as e:
            logger.error(f"Failed to send to client: {e}")
            return False

    async def broadcast(self, event: WebSocketEvent) -> int:
        """
        Send an event to all connected clients.

        Returns:
            Number of clients that received the message
        """
        if not self.has_connections:
            return 0

        message = event.to_json()
        disconnected: List[WebSocket] = []
        sent_count = 0

        for connection in list(self.active_connections):
            try:
                await connection.send_text(message)
                sent_count += 1
            except Exception as e:
                logger.debug(f"Client disconnected during broadcast: {e}")
                disconnected.append(connection)

        # Clean up disconnected clients
        async with self._lock:
            for conn in disconnected:
                if conn in self.active_connections:
                    self.active_connections.remove(conn)

        if disconnected:
            logger.info(f"Cleaned up {len(disconnected)} disconnected clients")

        return sent_count

    async def broadcast_chat(self, message: ChatMessage) -> int:
        """Broadcast a chat message."""
        event = ChatMessageEvent(
            user=message.user,
            message=message.message,
            timestamp=message.timestamp.isoformat(),
        )
        return await self.broadcast(event)

    async def broadcast_cover(self, song: Song) -> int:
        """Broadcast a resolved cover."""
        event = CoverUpdateEvent(
            song_id=song.id,
            cover_ref=song.cover_ref or "",
            album=song.album,
        )
        return await self.broadcast(event)

    async def send_welcome(
        self,
        websocket: WebSocket,
        total_songs: int = 0,
        max_songs: int = 12,
        current_playing: Optional[dict] = None,
    ) -> bool:
        """
        Send welcome message to a newly connected client.

        Returns:
            True if sent successfully
        """
        event = ConnectionEvent(
            total_songs=total_songs,
            max_songs=max_songs,
            current_playing=current_playing,
        )
        return await self.send_personal(websocket, event)

    @property
    def connection_count(self) -> int:
        """Get the number of active connections."""
        return len(self.active_connections)

    @property
    def has_connections(self) -> bool:
        """Check if there are any active connections."""
        return len(self.active_connections) > 0


class WebSocketRelay:
    """
    Bus consumer that pushes vote events and playback switches to clients.

    The bus is synchronous, so broadcasts are scheduled on the running
    event loop. Without a running loop (plain sync use) nothing is sent.
    """

    def __init__(self, ws_manager: WebSocketManager):
        self.ws_manager = ws_manager
        self._tasks: Set[asyncio.Task] = set()

    def on_event(self, event: VoteEvent) -> None:
        self.schedule(self.ws_manager.broadcast(RosterUpdateEvent.from_vote_event(event)))

    def on_playback_change(self, song: Optional[Song]) -> None:
        """PlaybackSelector listener."""
        event = NowPlayingEvent(
            song=song.to_dict() if song else None,
            is_playing=song is not None,
        )
        self.schedule(self.ws_manager.broadcast(event))

    def schedule(self, coro: Coroutine) -> Optional[asyncio.Task]:
        """Run a coroutine in the background on the current loop."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            return None

        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception():
            logger.error(f"Background task failed: {task.exception()}")

    @property
    def pending(self) -> int:
        """Number of background tasks still running."""
        return len(self._tasks)
