"""
REST API and WebSocket routes for the voting system.
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from services.chat_service import ChatService
from services.errors import VotingError
from services.voting_service import VotingService
from .websocket_manager import WebSocketManager

logger = logging.getLogger(__name__)

# Status code per VotingError code
ERROR_STATUS = {
    "SONG_NOT_FOUND": 404,
    "DUPLICATE_SONG": 409,
    "ROSTER_FULL": 409,
    "INVALID_VOTE": 400,
    "INVALID_MESSAGE": 400,
}


# -------------------------------------------------------------------------
# Request/Response Models
# -------------------------------------------------------------------------

class VoteRequest(BaseModel):
    """Request model for votes and super votes."""
    model_config = ConfigDict(populate_by_name=True)

    song_id: Optional[str] = Field(default=None, alias="songId")


class AddSongRequest(BaseModel):
    """Request model for adding a song."""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    artist: Optional[str] = None
    album: str = ""
    audio_ref: Optional[str] = Field(default=None, alias="audioRef")
    cover_ref: Optional[str] = Field(default=None, alias="coverRef")
    year: Optional[int] = None


class ChatRequest(BaseModel):
    """Request model for posting a chat message."""
    user: Optional[str] = None
    message: Optional[str] = None
    timestamp: Optional[datetime] = None


def error_response(error: VotingError) -> HTTPException:
    """Map a core error to an HTTP error."""
    status = ERROR_STATUS.get(error.code, 500)
    return HTTPException(
        status_code=status,
        detail={"error": error.user_message, "code": error.code},
    )


def require(value: Optional[str], field_name: str) -> str:
    """Raise 400 if a required field is missing or blank."""
    if not value or not value.strip():
        raise HTTPException(status_code=400, detail={"error": f"{field_name} is required"})
    return value.strip()


# -------------------------------------------------------------------------
# Router Factory
# -------------------------------------------------------------------------

def create_router(
    ws_manager: WebSocketManager,
    voting: VotingService,
    chat: ChatService,
    add_song: Callable[..., Awaitable],
    post_chat: Callable[..., Awaitable],
    refresh_covers: Callable[[], Awaitable[int]],
    get_session_logs: Callable[[], Awaitable[list]],
) -> APIRouter:
    """
    Create the API router with all routes.

    Args:
        ws_manager: WebSocket connection manager
        voting: Voting service
        chat: Chat service
        add_song: Callback to add a song and start cover enrichment
        post_chat: Callback to post a chat message and handle song commands
        refresh_covers: Callback to refresh placeholder covers
        get_session_logs: Callback to get session log entries

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api")

    # -------------------------------------------------------------------------
    # Health Check
    # -------------------------------------------------------------------------

    @router.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok", "connections": ws_manager.connection_count}

    # -------------------------------------------------------------------------
    # Song Endpoints
    # -------------------------------------------------------------------------

    @router.get("/songs")
    async def get_songs():
        """Get songs sorted by votes, with the leader and player state."""
        try:
            return {**voting.overview(), "success": True}
        except Exception as e:
            logger.error(f"Error getting songs: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/songs")
    async def create_song(request: AddSongRequest):
        """Add a song to the roster."""
        title = require(request.title, "title")
        artist = require(request.artist, "artist")
        try:
            song = await add_song(
                title=title,
                artist=artist,
                album=request.album,
                audio_ref=request.audio_ref,
                cover_ref=request.cover_ref,
                year=request.year,
            )
            return {"song": song.to_dict(), "in_roster": song.id in voting.store, "success": True}
        except VotingError as e:
            logger.warning(f"Could not add song: {e}")
            raise error_response(e)
        except Exception as e:
            logger.error(f"Error adding song: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.delete("/songs/{song_id}")
    async def delete_song(song_id: str):
        """Remove a song from the roster."""
        try:
            event = voting.remove_song(song_id)
            return {
                "success": True,
                "removed": song_id,
                "highest_voted": event.leader.to_dict() if event.leader else None,
            }
        except VotingError as e:
            raise error_response(e)
        except Exception as e:
            logger.error(f"Error removing song: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    # -------------------------------------------------------------------------
    # Voting Endpoints
    # -------------------------------------------------------------------------

    @router.post("/vote")
    async def vote(request: VoteRequest):
        """Add one vote to a song."""
        song_id = require(request.song_id, "songId")
        try:
            event = voting.vote(song_id)
            song = voting.get_song(song_id)
            return {
                "song": song.to_dict(),
                "kind": event.kind.value,
                "highest_voted": event.leader.to_dict() if event.leader else None,
                "current_playing": voting.player.get_current_playing(),
                "message": f'Vote registered for "{song.title}"!',
                "success": True,
            }
        except VotingError as e:
            raise error_response(e)
        except Exception as e:
            logger.error(f"Error registering vote: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/super-vote")
    async def super_vote(request: VoteRequest):
        """Add enough votes to put a song in the lead."""
        song_id = require(request.song_id, "songId")
        try:
            event, votes_added = voting.super_vote(song_id)
            song = voting.get_song(song_id)
            return {
                "song": song.to_dict(),
                "kind": event.kind.value,
                "votes_added": votes_added,
                "highest_voted": event.leader.to_dict() if event.leader else None,
                "current_playing": voting.player.get_current_playing(),
                "message": f'Super vote! "{song.title}" now has {song.votes} votes!',
                "success": True,
            }
        except VotingError as e:
            raise error_response(e)
        except Exception as e:
            logger.error(f"Error registering super vote: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.get("/player")
    async def get_player():
        """Get current player state."""
        try:
            return {**voting.player_state(), "success": True}
        except Exception as e:
            logger.error(f"Error getting player state: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    # -------------------------------------------------------------------------
    # Chat Endpoints
    # -------------------------------------------------------------------------

    @router.get("/chat")
    async def get_chat():
        """Get recent chat messages."""
        return {
            "messages": [m.to_dict() for m in chat.recent()],
            "success": True,
        }

    @router.post("/chat")
    async def send_chat(request: ChatRequest):
        """Post a chat message."""
        try:
            message, command = await post_chat(request.user, request.message, request.timestamp)
            return {
                "message": message.to_dict(),
                "command": (
                    {"artist": command.artist, "title": command.title} if command else None
                ),
                "success": True,
            }
        except VotingError as e:
            raise error_response(e)
        except Exception as e:
            logger.error(f"Error sending chat message: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    # -------------------------------------------------------------------------
    # Maintenance Endpoints
    # -------------------------------------------------------------------------

    @router.post("/update-covers")
    async def update_covers():
        """Refresh missing or placeholder album covers."""
        try:
            count = await refresh_covers()
            return {
                "success": True,
                "updated_count": count,
                "message": f"{count} album covers updated",
            }
        except Exception as e:
            logger.error(f"Error updating covers: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.get("/session/logs")
    async def get_logs():
        """Get recent session log entries."""
        try:
            return await get_session_logs()
        except Exception as e:
            logger.error(f"Error getting logs: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    # -------------------------------------------------------------------------
    # WebSocket Endpoint
    # -------------------------------------------------------------------------

    @router.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """WebSocket endpoint for real-time updates."""
        await ws_manager.connect(websocket)

        try:
            await ws_manager.send_welcome(
                websocket,
                total_songs=len(voting.store),
                max_songs=voting.store.max_songs,
                current_playing=voting.player.get_current_playing(),
            )

            # Keep connection alive
            while True:
                await websocket.receive_text()
                await websocket.send_text('{"event_type": "pong"}')

        except WebSocketDisconnect:
            await ws_manager.disconnect(websocket)
        except Exception as e:
            logger.error(f"WebSocket error: {e}")
            await ws_manager.disconnect(websocket)

    return router
