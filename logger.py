"""
Status Logger - the short status line plus the diagnostic log trail.

The trail is append-only: entries are never edited, only the oldest ones
fall off once ``max_entries`` is exceeded. Not thread safe by itself;
SessionState only touches it while holding its own lock.
"""

from datetime import datetime
from typing import List, Tuple
from dataclasses import dataclass


@dataclass(frozen=True)
class LogEntry:
    """One line of the log trail."""
    timestamp: datetime
    message: str
    level: str = "INFO"

    def __str__(self) -> str:
        time_str = self.timestamp.strftime("%H:%M:%S")
        return f"[{time_str}] {self.level}: {self.message}"


class StatusLogger:
    """Keeps the current status string and a bounded history of log entries."""

    def __init__(self, max_entries: int = 500, initial_status: str = "Stopped"):
        """
        Args:
            max_entries: Maximum number of log entries to keep in memory
            initial_status: Status string shown before anything happens
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._entries: List[LogEntry] = []
        self._max_entries = max_entries
        self._status = initial_status

    def log_info(self, message: str) -> None:
        self._append(message, "INFO")

    def log_warning(self, message: str) -> None:
        self._append(message, "WARNING")

    def log_error(self, message: str) -> None:
        self._append(message, "ERROR")

    def update_status(self, status: str, message: str) -> None:
        """Replace the status string and log ``message`` describing the change."""
        self._status = status
        self.log_info(message)

    def get_current_status(self) -> str:
        """Returns the current status message."""
        return self._status

    def get_all_logs(self) -> List[LogEntry]:
        return self._entries.copy()

    def clear_logs(self) -> None:
        """Drop the history; the clearing itself is the first new entry."""
        self._entries.clear()
        self.log_info("Log history cleared")

    def format_lines(self) -> Tuple[str, ...]:
        """Render every entry for display."""
        return tuple(str(entry) for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _append(self, message: str, level: str) -> None:
        self._entries.append(LogEntry(timestamp=datetime.now(), message=message, level=level))

        if len(self._entries) > self._max_entries:
            del self._entries[: len(self._entries) - self._max_entries]
