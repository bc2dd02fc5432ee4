"""
Domain models for the Multi Auto Clicker application.
Each class follows the Single Responsibility Principle (SRP).
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional


class Mode(Enum):
    """Enumeration of the mutually exclusive activity modes."""
    IDLE = "idle"
    CLICKING = "clicking"
    INJECTING_KEYS = "injecting_keys"


class ActionKind(Enum):
    """What kind of device input an action drives."""
    CLICK = "click"
    KEY = "key"


@dataclass(frozen=True)
class ActionTarget:
    """
    Identifies one device action: the left mouse button or a single key token.

    Two targets compare equal only when they drive the same input, which is
    what the scheduler uses to decide whether a held key has to change.
    """
    kind: ActionKind
    token: Optional[str] = None

    @staticmethod
    def click() -> "ActionTarget":
        return ActionTarget(ActionKind.CLICK)

    @staticmethod
    def key(token: str) -> "ActionTarget":
        return ActionTarget(ActionKind.KEY, token)

    def __str__(self) -> str:
        if self.kind == ActionKind.CLICK:
            return "click"
        return f"key '{self.token}'"


@dataclass
class HeldAction:
    """An action that is pressed down until ``release_at`` (monotonic seconds)."""
    target: ActionTarget
    release_at: float

    def is_due(self, now: float) -> bool:
        """Check if the hold timer has expired."""
        return now >= self.release_at


@dataclass
class ApplicationSettings:
    """
    In-memory application defaults.

    Nothing is persisted; every start begins from these values.
    """

    interval_ms: int = 1000
    key_text: str = "w, s"
    hold_mode: bool = False
    inject_hotkey: str = "F5"
    click_hotkey: str = "F6"
    stop_hotkey: str = "F7"
    min_interval_ms: int = 1
    max_interval_ms: int = 10_000

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.min_interval_ms <= 0:
            raise ValueError("Minimum interval must be positive")

        if self.max_interval_ms < self.min_interval_ms:
            raise ValueError("Maximum interval cannot be below the minimum")

        self.interval_ms = self.clamp_interval(self.interval_ms)

    def clamp_interval(self, value: int) -> int:
        """Clamp an interval in milliseconds into the supported range."""
        return max(self.min_interval_ms, min(self.max_interval_ms, int(value)))
