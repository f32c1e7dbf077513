"""
PlayOff Music Voting - Main Entry Point

This is the main application file that initializes all services
and starts the server.

Usage:
    python main.py

Or with uvicorn directly:
    uvicorn main:app --host 127.0.0.1 --port 3000 --reload
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
import uvicorn

# Configure logging first
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("playoff")

# Import our modules
from config.settings import Settings, get_settings
from models.roster import default_roster
from models.song import Song
from services.chat_service import ChatService
from services.cover_art_service import CoverArtService, placeholder_cover
from services.errors import DuplicateError
from services.session_logger import SessionLogger
from services.voting_service import VotingService
from api.websocket_manager import WebSocketManager, WebSocketRelay
from api.routes import create_router


# =============================================================================
# Application State
# =============================================================================

class AppState:
    """Holds all application services and state."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.ws_manager = WebSocketManager()
        self.relay = WebSocketRelay(self.ws_manager)
        self.voting = VotingService(max_songs=settings.max_songs)
        self.chat = ChatService(
            retention=settings.chat_retention,
            history_limit=settings.chat_history_limit,
        )
        self.cover_art = CoverArtService(settings)
        self.session_logger = SessionLogger(settings.session_logs_dir)

        # The relay is subscribed after the built-in consumers
        self.voting.bus.subscribe(self.relay)
        self.voting.player.add_listener(self.relay.on_playback_change)
        self.voting.player.add_listener(self.on_playback_change)

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Start the session log and load the initial roster."""
        if self.settings.session_log_enabled:
            await self.session_logger.start_session()

        if self.settings.seed_roster:
            self.voting.seed(default_roster())

    # -------------------------------------------------------------------------
    # Event Handlers
    # -------------------------------------------------------------------------

    def on_playback_change(self, song: Optional[Song]) -> None:
        """Write each new song to the session log."""
        if song and self.settings.session_log_enabled:
            self.relay.schedule(self.session_logger.log_play(song))

    async def add_song(self, **fields) -> Song:
        """
        Add a song, then look up its cover in the background.

        Raises:
            DuplicateError: Same title and artist already present
        """
        song = self.voting.add_song(**fields)
        if song.has_placeholder_cover and song.id in self.voting.store:
            self.relay.schedule(self.enrich_song(song.id))
        return song

    async def enrich_song(self, song_id: str) -> None:
        """Resolve a cover for a song and push it to clients."""
        cover = await self.cover_art.enrich(self.voting.store, song_id)
        song = self.voting.store.get(song_id)
        if cover and song:
            await self.ws_manager.broadcast_cover(song)

    async def post_chat(self, user: Optional[str], message: str, timestamp: Optional[datetime] = None):
        """
        Post a chat message and handle song commands in it.

        Returns:
            Tuple of (ChatMessage, SongCommand or None)
        """
        mark = self.chat.total_messages
        chat_message, command = self.chat.post(user, message, timestamp)

        if command:
            await self.handle_song_command(command)

        for new_message in self.chat.since(mark):
            self.relay.schedule(self.ws_manager.broadcast_chat(new_message))

        return chat_message, command

    async def handle_song_command(self, command) -> Optional[Song]:
        """Add a song requested in chat."""
        try:
            song = await self.add_song(
                title=command.title,
                artist=command.artist,
                cover_ref=placeholder_cover(command.artist, command.title),
                added_by=command.requested_by,
            )
        except DuplicateError as e:
            logger.warning(f"Chat request rejected: {e}")
            self.chat.bot_say(e.user_message)
            return None

        if song.id not in self.voting.store:
            self.chat.bot_say(
                f'"{song.title}" by {song.artist} was added but dropped to keep the '
                f"{self.settings.max_songs} song limit. Vote for your favorites!"
            )
            return song

        self.chat.bot_say(
            f'"{song.title}" by {song.artist} was added to the vote! '
            f"Requested by {command.requested_by}"
        )
        self.chat.bot_say("Don't forget to vote! The most voted song plays automatically!")
        return song

    async def refresh_covers(self) -> int:
        """Refresh placeholder covers for the whole roster."""
        return await self.cover_art.refresh_placeholders(self.voting.store)

    async def get_session_logs(self) -> list:
        """Get session logs for API."""
        return await self.session_logger.get_recent_entries(20)


# =============================================================================
# FastAPI Application
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application with fresh services."""
    settings = settings or get_settings()
    state = AppState(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info("=" * 60)
        logger.info("Starting PlayOff Music Voting...")
        logger.info("=" * 60)

        await state.start()

        leader = state.voting.ledger.get_leader()
        logger.info(f"Songs loaded: {len(state.voting.store)} (max {settings.max_songs})")
        logger.info(f"Consumers registered: {len(state.voting.bus.consumers)}")
        if leader:
            logger.info(f"Leader: '{leader.title}' by {leader.artist} ({leader.votes} votes)")
        logger.info(f"Server running at http://{settings.server_host}:{settings.server_port}")
        logger.info("=" * 60)

        yield

        logger.info("Shutting down...")

    app = FastAPI(
        title="PlayOff Music Voting",
        description="Vote for songs; the most voted song plays automatically",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.playoff = state

    api_router = create_router(
        ws_manager=state.ws_manager,
        voting=state.voting,
        chat=state.chat,
        add_song=state.add_song,
        post_chat=state.post_chat,
        refresh_covers=state.refresh_covers,
        get_session_logs=state.get_session_logs,
    )
    app.include_router(api_router)

    # Serve the built frontend when present
    frontend_dir = Path(settings.frontend_dir)
    if frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=frontend_dir, html=True), name="frontend")

    return app


app = create_app()


# =============================================================================
# Entry Point
# =============================================================================

def main():
    """Main entry point."""
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
        log_level="info" if not settings.debug else "debug",
    )


if __name__ == "__main__":
    main()
