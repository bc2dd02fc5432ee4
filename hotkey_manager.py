"""Global hotkey listener built on top of pynput.

Translates the three trigger keys into mode changes on the shared session
state, regardless of which window has focus. A listener failure is written
to the session log and ends the listener thread; the rest of the application
keeps running in whatever mode was last set.
"""

from __future__ import annotations

import threading
from typing import Callable, Dict, Optional, Tuple

try:
    from pynput import keyboard  # type: ignore
except Exception as _e:  # pragma: no cover - environment dependent
    keyboard = None  # type: ignore

from session_state import SessionState


class HotkeyListener:
    """Listens for the inject/click/stop hotkeys on a dedicated thread."""

    def __init__(
        self,
        state: SessionState,
        stop_event: Optional[threading.Event] = None,
        inject_hotkey: str = "F5",
        click_hotkey: str = "F6",
        stop_hotkey: str = "F7",
    ) -> None:
        self._state = state
        self._stop_event = stop_event or threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._listener: Optional[object] = None

        self._bindings: Dict[str, Tuple[str, Callable[[str], object]]] = {}
        self._bind(inject_hotkey, state.start_key_injection)
        self._bind(click_hotkey, state.start_clicking)
        self._bind(stop_hotkey, state.stop)

    def start(self) -> bool:
        if self.is_running():
            return False

        self._thread = threading.Thread(target=self._listen, name="hotkey-listener", daemon=True)
        self._thread.start()
        return True

    def stop(self, timeout: float = 2.0) -> None:
        self._stop_event.set()

        listener = self._listener
        if listener is not None:
            listener.stop()  # type: ignore[attr-defined]

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)

    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def handle_key(self, name: Optional[str]) -> bool:
        """Run the mode change bound to key ``name``; True if one fired."""
        if self._stop_event.is_set() or not name:
            return False

        binding = self._bindings.get(name.lower())
        if binding is None:
            return False

        label, action = binding
        action(label)
        return True

    @staticmethod
    def key_name(key: object) -> Optional[str]:
        """Normalise a pynput key (``Key.f5`` or ``KeyCode``) to a lowercase name."""
        name = getattr(key, "name", None)
        if name:
            return str(name).lower()
        char = getattr(key, "char", None)
        return char.lower() if char else None

    # Internal helpers -------------------------------------------------

    def _bind(self, hotkey: str, action: Callable[[str], object]) -> None:
        name = self._normalize_hotkey(hotkey)
        if name in self._bindings:
            raise ValueError(f"Hotkey {hotkey!r} is bound twice")
        self._bindings[name] = (hotkey.strip(), action)

    @staticmethod
    def _normalize_hotkey(hotkey: str) -> str:
        token = (hotkey or "").strip().strip("<>").strip().lower()
        if not token:
            raise ValueError("Empty hotkey string")
        return token

    def _listen(self) -> None:
        try:
            if keyboard is None:
                raise RuntimeError("pynput/keyboard backend not available; global hotkeys disabled")

            with keyboard.Listener(on_press=self._on_press) as listener:
                self._listener = listener
                if self._stop_event.is_set():
                    listener.stop()
                listener.join()
        except Exception as exc:
            self._state.log_error(f"Hotkey listener error: {exc}")
        finally:
            self._listener = None

    def _on_press(self, key: object) -> Optional[bool]:
        if self._stop_event.is_set():
            return False
        self.handle_key(self.key_name(key))
        return None
