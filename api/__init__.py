"""API module for the PlayOff voting system."""

from .websocket_manager import WebSocketManager, WebSocketRelay
from .routes import create_router

__all__ = [
    "WebSocketManager",
    "WebSocketRelay",
    "create_router",
]
