"""
Device actions: the thin layer that synthesises mouse and keyboard input.

Mouse input goes through pyautogui (left button only), keyboard input through
pynput's keyboard Controller. Both backends are imported lazily so the rest
of the application (and its tests) can run without a display.

Key tokens are resolved case-insensitively against a fixed table of named
keys; any other token types its first character. An empty token resolves to
nothing and is skipped without error.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Tuple


class ActionError(Exception):
    pass


class KeyKind(Enum):
    """How a resolved key is handed to pynput."""
    SPECIAL = "special"  # attribute of pynput.keyboard.Key
    CHAR = "char"


class ResolvedKey(NamedTuple):
    """A key token mapped to either a pynput ``Key`` attribute or a character."""
    kind: KeyKind
    value: str


# token -> pynput.keyboard.Key attribute name
_SPECIAL_KEYS: Dict[str, str] = {
    "space": "space",
    "enter": "enter",
    "return": "enter",
    "tab": "tab",
    "backspace": "backspace",
    "back": "backspace",
    "escape": "esc",
    "esc": "esc",
    "up": "up",
    "down": "down",
    "left": "left",
    "right": "right",
    "shift": "shift",
    "control": "ctrl",
    "ctrl": "ctrl",
    "alt": "alt",
    "meta": "cmd",
    "win": "cmd",
    "windows": "cmd",
    "capslock": "caps_lock",
    "caps": "caps_lock",
    "delete": "delete",
    "del": "delete",
    "home": "home",
    "end": "end",
    "pageup": "page_up",
    "pgup": "page_up",
    "pagedown": "page_down",
    "pgdn": "page_down",
}


def resolve_key(token: str) -> Optional[ResolvedKey]:
    """Map a key token to the input it should produce, or None if empty."""
    if not token:
        return None
    special = _SPECIAL_KEYS.get(token.lower())
    if special is not None:
        return ResolvedKey(KeyKind.SPECIAL, special)
    return ResolvedKey(KeyKind.CHAR, token[0])


class DeviceActionSink:
    """Performs clicks and key presses on the real input devices."""

    def __init__(self) -> None:
        self._keyboard: Optional[Any] = None
        self._key_module: Optional[Any] = None
        self._pyautogui: Optional[Any] = None

    # Mouse ---------------------------------------------------------------

    def press_click(self) -> None:
        self._mouse().mouseDown(button="left")

    def release_click(self) -> None:
        self._mouse().mouseUp(button="left")

    def click_once(self) -> None:
        self._mouse().click(button="left")

    # Keyboard ------------------------------------------------------------

    def press_key(self, token: str) -> None:
        key = self._key_for(token)
        if key is None:
            return
        self._keyboard_controller().press(key)

    def release_key(self, token: str) -> None:
        key = self._key_for(token)
        if key is None:
            return
        self._keyboard_controller().release(key)

    def tap_key(self, token: str) -> None:
        key = self._key_for(token)
        if key is None:
            return
        controller = self._keyboard_controller()
        controller.press(key)
        controller.release(key)

    # Backends ------------------------------------------------------------

    def _key_for(self, token: str) -> Optional[Any]:
        resolved = resolve_key(token)
        if resolved is None:
            return None
        if resolved.kind == KeyKind.CHAR:
            return resolved.value
        self._keyboard_controller()
        return getattr(self._key_module, resolved.value)

    def _keyboard_controller(self) -> Any:
        if self._keyboard is None:
            controller_cls, key_module = _get_pynput()
            if controller_cls is None or key_module is None:
                raise ActionError("No keyboard backend available (install pynput)")
            self._keyboard = controller_cls()
            self._key_module = key_module
        return self._keyboard

    def _mouse(self) -> Any:
        if self._pyautogui is None:
            try:
                import pyautogui  # local import to avoid needing a display at import time
            except Exception as e:  # pragma: no cover - environment dependent
                raise ActionError(f"No mouse backend available: {e}")
            pyautogui.FAILSAFE = True  # Move mouse to corner to abort
            pyautogui.PAUSE = 0.0  # Intervals are timed by the scheduler
            self._pyautogui = pyautogui
        return self._pyautogui


def _get_pynput() -> Tuple[Optional[Any], Optional[Any]]:
    """Import pynput lazily and return (KeyboardControllerClass, KeyModule)."""
    try:
        from pynput.keyboard import Controller as KeyboardController, Key as KeyModule  # type: ignore
        return KeyboardController, KeyModule
    except Exception:
        return None, None
