"""
Application settings using Pydantic Settings.
Loads configuration from .env file with validation.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # -------------------------------------------------------------------------
    # Server Configuration
    # -------------------------------------------------------------------------
    server_host: str = Field(
        default="127.0.0.1",
        description="Server bind host"
    )
    server_port: int = Field(
        default=3000,
        description="Server bind port"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    frontend_dir: str = Field(
        default="dist",
        description="Directory with the built frontend (served if present)"
    )

    # -------------------------------------------------------------------------
    # Roster Settings
    # -------------------------------------------------------------------------
    max_songs: int = Field(
        default=12,
        ge=1,
        le=100,
        description="Maximum songs in the voting roster"
    )
    seed_roster: bool = Field(
        default=True,
        description="Load the default song roster at startup"
    )

    # -------------------------------------------------------------------------
    # Chat Settings
    # -------------------------------------------------------------------------
    chat_retention: int = Field(
        default=100,
        ge=1,
        description="Number of chat messages kept in memory"
    )
    chat_history_limit: int = Field(
        default=20,
        ge=1,
        description="Number of chat messages returned by the API"
    )

    # -------------------------------------------------------------------------
    # Cover Art Lookup
    # -------------------------------------------------------------------------
    cover_lookup_enabled: bool = Field(
        default=True,
        description="Look up album covers for songs added via chat"
    )
    cover_lookup_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for cover art HTTP requests (seconds)"
    )
    itunes_search_url: str = Field(
        default="https://itunes.apple.com/search",
        description="iTunes search API endpoint"
    )
    lastfm_api_url: str = Field(
        default="https://ws.audioscrobbler.com/2.0/",
        description="Last.fm API endpoint"
    )
    lastfm_api_key: Optional[str] = Field(
        default=None,
        description="Last.fm API key (Last.fm lookup is skipped if unset)"
    )

    # -------------------------------------------------------------------------
    # Session Log
    # -------------------------------------------------------------------------
    session_log_enabled: bool = Field(
        default=True,
        description="Write a CSV log of played songs per session"
    )
    session_logs_dir: str = Field(
        default="logs/sessions",
        description="Directory to store session logs"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.
    Uses lru_cache to only load settings once.
    """
    return Settings()
