"""Configuration module for the PlayOff voting system."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
