"""
Session logging service.
Logs played songs to CSV files per session.
"""

import csv
import io
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional
import aiofiles

from models.song import Song

logger = logging.getLogger(__name__)


class SessionLogger:
    """
    Logs every "now playing" switch to a CSV file.
    Creates a new file for each session.
    """

    # CSV column headers
    HEADERS = [
        "timestamp",
        "song_id",
        "song_title",
        "artist",
        "album",
        "votes",
        "added_by",
    ]

    def __init__(self, logs_dir: str = "logs/sessions"):
        """
        Initialize session logger.

        Args:
            logs_dir: Directory to store session logs
        """
        self.logs_dir = Path(logs_dir)
        self.current_file: Optional[Path] = None
        self.session_start: Optional[datetime] = None

    async def start_session(self) -> Path:
        """
        Start a new logging session.
        Creates a new CSV file with headers.

        Returns:
            Path to the session log file
        """
        self.logs_dir.mkdir(parents=True, exist_ok=True)

        self.session_start = datetime.now()
        filename = self.session_start.strftime("session_%Y%m%d_%H%M%S.csv")
        self.current_file = self.logs_dir / filename

        async with aiofiles.open(self.current_file, mode="w", newline="", encoding="utf-8") as f:
            await f.write(self._format_row(self.HEADERS))

        logger.info(f"Started session log: {self.current_file}")
        return self.current_file

    async def log_play(self, song: Song) -> None:
        """
        Log a song that started playing.

        Args:
            song: The song now playing
        """
        if not self.current_file:
            await self.start_session()

        row = [
            datetime.now().isoformat(),
            song.id,
            song.title,
            song.artist,
            song.album,
            str(song.votes),
            song.added_by or "",
        ]

        async with aiofiles.open(self.current_file, mode="a", newline="", encoding="utf-8") as f:
            await f.write(self._format_row(row))

        logger.debug(f"Logged play: {song.title} ({song.votes} votes)")

    def _format_row(self, values: List[str]) -> str:
        buffer = io.StringIO()
        csv.writer(buffer, lineterminator="\n").writerow(values)
        return buffer.getvalue()

    async def get_recent_entries(self, limit: int = 10) -> list:
        """
        Get recent log entries.

        Args:
            limit: Maximum entries to return

        Returns:
            List of dictionaries with entry data
        """
        if not self.current_file or not self.current_file.exists():
            return []

        try:
            async with aiofiles.open(self.current_file, mode="r", newline="", encoding="utf-8") as f:
                content = await f.read()
        except OSError as e:
            logger.error(f"Error reading session log: {e}")
            return []

        rows = list(csv.DictReader(io.StringIO(content)))
        return rows[-limit:]

    def get_log_file_path(self) -> Optional[str]:
        """Get the current log file path."""
        return str(self.current_file) if self.current_file else None
