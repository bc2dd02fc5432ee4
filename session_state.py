"""
Shared session state - the single source of truth shared by the hotkey
listener, the action scheduler and the GUI.

Every read or write happens in one short transaction under ``_lock``. The
lock is never held while talking to an input device.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from key_sequence import parse_key_sequence
from logger import StatusLogger
from models import ApplicationSettings, Mode


STATUS_STOPPED = "Stopped"
STATUS_CLICKING = "Clicking..."
STATUS_INJECTING = "Injecting keystrokes..."


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable copy of the session for display purposes."""
    mode: Mode
    interval_ms: int
    hold_mode: bool
    key_text: str
    key_sequence: Tuple[str, ...]
    key_cursor: int
    displayed_key: str
    status: str
    log_lines: Tuple[str, ...]


class SessionState:
    """
    Lock-guarded record of the current mode and its configuration.

    The public attributes (``mode``, ``interval_ms``, ``hold_mode``,
    ``key_sequence``, ``key_cursor``, ``displayed_key``) may only be touched
    inside :meth:`transaction`; everything else goes through the methods
    below, each of which is one transaction.
    """

    def __init__(
        self,
        settings: Optional[ApplicationSettings] = None,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[StatusLogger] = None,
    ) -> None:
        self._settings = settings or ApplicationSettings()
        self._clock = clock
        self._lock = threading.Lock()
        self.logger = logger or StatusLogger(initial_status=STATUS_STOPPED)

        self.mode = Mode.IDLE
        self.interval_ms = self._settings.interval_ms
        self.hold_mode = self._settings.hold_mode
        self.key_text = self._settings.key_text
        self.key_sequence: List[str] = parse_key_sequence(self.key_text)
        self.key_cursor = 0
        self.displayed_key = ""
        self.last_action_at = self._clock()

    @property
    def settings(self) -> ApplicationSettings:
        return self._settings

    @contextmanager
    def transaction(self) -> Iterator["SessionState"]:
        """Hold the state lock for the duration of the ``with`` block."""
        with self._lock:
            yield self

    # Mode changes --------------------------------------------------------

    def start_clicking(self, trigger: str = "button") -> None:
        with self._lock:
            self._set_mode(Mode.CLICKING, STATUS_CLICKING, f"Started clicking! ({trigger})")

    def start_key_injection(self, trigger: str = "button") -> bool:
        """Switch to key injection; rejected while the key sequence is empty."""
        with self._lock:
            if not self.key_sequence:
                self.logger.log_warning("Cannot inject empty key sequence!")
                return False

            self._set_mode(
                Mode.INJECTING_KEYS,
                STATUS_INJECTING,
                f"Started injecting keys '{self.key_text}' ({trigger})",
            )
            self.key_cursor = 0
            return True

    def stop(self, trigger: str = "button") -> None:
        with self._lock:
            self._set_mode(Mode.IDLE, STATUS_STOPPED, f"Stopped all actions ({trigger})")

    # Configuration -------------------------------------------------------

    def set_interval_ms(self, value: int) -> int:
        """Store the clamped interval and return the value actually applied."""
        interval = self._settings.clamp_interval(value)
        with self._lock:
            self.interval_ms = interval
        return interval

    def set_hold_mode(self, enabled: bool) -> None:
        with self._lock:
            self.hold_mode = bool(enabled)

    def set_key_text(self, text: str) -> List[str]:
        """
        Store the raw key text and re-parse it.

        The cursor is left alone; it is reduced modulo the new length the
        next time a key is picked. Returns the parsed tokens.

        An empty parse does replace the old sequence. The running scheduler
        treats an empty sequence as a no-op and keeps the cursor, so nothing
        from the last good sequence is lost or fired in the meantime.
        """
        tokens = parse_key_sequence(text)
        with self._lock:
            self.key_text = text
            self.key_sequence = tokens
        return list(tokens)

    # Observability -------------------------------------------------------

    def clear_log(self) -> None:
        with self._lock:
            self.logger.clear_logs()

    def log_error(self, message: str) -> None:
        with self._lock:
            self.logger.log_error(message)

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                mode=self.mode,
                interval_ms=self.interval_ms,
                hold_mode=self.hold_mode,
                key_text=self.key_text,
                key_sequence=tuple(self.key_sequence),
                key_cursor=self.key_cursor,
                displayed_key=self.displayed_key,
                status=self.logger.get_current_status(),
                log_lines=self.logger.format_lines(),
            )

    def _set_mode(self, mode: Mode, status: str, message: str) -> None:
        # Caller holds the lock
        self.mode = mode
        self.logger.update_status(status, message)
        self.last_action_at = self._clock()

        if mode == Mode.IDLE:
            self.displayed_key = ""
        elif mode == Mode.INJECTING_KEYS and self.key_sequence:
            self.displayed_key = self.key_sequence[0]
