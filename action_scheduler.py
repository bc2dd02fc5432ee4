"""
Action Scheduler - the polling loop that turns the shared session state into
clicks and key presses.

SRP: This class decides *when* to fire, hold or release an action. It knows
nothing about hotkeys or the GUI; it reads SessionState and talks to a device
action sink.

Each tick:
    1. release a held action whose timer expired
    2. under the state lock, decide what to release and what to start
    3. outside the lock, release first, then press/click/tap
    4. sleep until the next release or fire time (never less than 1 ms)
"""

import threading
import time
from typing import Any, Callable, Optional, Tuple

from models import ActionKind, ActionTarget, HeldAction, Mode
from session_state import SessionState


class ActionScheduler:
    """
    Drives the device sink from a background thread.

    The held action (if any) and the discrete fire cadence are private to the
    scheduler; only SessionState is shared with other threads.
    """

    MIN_SLEEP_SECONDS = 0.001

    def __init__(
        self,
        state: SessionState,
        sink: Any,
        stop_event: Optional[threading.Event] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._state = state
        self._sink = sink
        self._stop_event = stop_event or threading.Event()
        self._clock = clock
        self._worker_thread: Optional[threading.Thread] = None

        self._held: Optional[HeldAction] = None
        self._next_fire_at = clock()

    def start(self) -> bool:
        """
        Start the polling loop in a separate thread.

        Returns:
            bool: True if started, False if it was already running
        """
        if self.is_running():
            return False

        self._worker_thread = threading.Thread(
            target=self._run_loop, name="action-scheduler", daemon=True
        )
        self._worker_thread.start()
        return True

    def stop(self, timeout: float = 2.0) -> None:
        """Signal shutdown and wait for the loop to release held input and exit."""
        self._stop_event.set()

        if self._worker_thread and self._worker_thread.is_alive():
            self._worker_thread.join(timeout=timeout)
        else:
            self._release_on_shutdown()

    def is_running(self) -> bool:
        return bool(self._worker_thread and self._worker_thread.is_alive())

    def run_once(self, now: float) -> float:
        """
        Execute one tick at time ``now`` (seconds, same clock as the scheduler).

        Returns:
            float: seconds to sleep before the next tick
        """
        to_release: Optional[ActionTarget] = None
        to_start: Optional[Tuple[ActionTarget, bool]] = None

        if self._held is not None and self._held.is_due(now):
            to_release = self._take_held()

        with self._state.transaction() as state:
            interval = state.interval_ms / 1000.0

            if state.mode == Mode.IDLE:
                to_release = self._take_held() or to_release

            elif state.mode == Mode.CLICKING:
                if state.hold_mode:
                    if self._held is None or self._held.target != ActionTarget.click():
                        to_release = self._take_held() or to_release
                        self._held = HeldAction(ActionTarget.click(), now + interval)
                        to_start = (self._held.target, True)
                else:
                    to_release = self._take_held() or to_release
                    if now >= self._next_fire_at:
                        to_start = (ActionTarget.click(), False)
                        self._next_fire_at = now + interval

            elif not state.key_sequence:
                to_release = self._take_held() or to_release

            elif state.hold_mode:
                index = state.key_cursor % len(state.key_sequence)
                token = state.key_sequence[index]
                target = ActionTarget.key(token)

                if self._held is None or self._held.target != target:
                    to_release = self._take_held() or to_release
                    self._held = HeldAction(target, now + interval)
                    to_start = (target, True)
                    state.key_cursor = (index + 1) % len(state.key_sequence)

                state.displayed_key = token

            else:
                to_release = self._take_held() or to_release
                if now >= self._next_fire_at:
                    index = state.key_cursor % len(state.key_sequence)
                    token = state.key_sequence[index]
                    state.displayed_key = token
                    state.key_cursor = (index + 1) % len(state.key_sequence)
                    to_start = (ActionTarget.key(token), False)
                    self._next_fire_at = now + interval

        # Release before press so two distinct actions are never held at once
        if to_release is not None:
            self._release(to_release)
        if to_start is not None:
            self._start(*to_start)

        return self._sleep_duration(now)

    def _run_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                delay = self.run_once(self._clock())
                self._stop_event.wait(delay)
        finally:
            self._release_on_shutdown()

    def _sleep_duration(self, now: float) -> float:
        wake_at = self._held.release_at if self._held is not None else self._next_fire_at
        return max(self.MIN_SLEEP_SECONDS, wake_at - now)

    def _take_held(self) -> Optional[ActionTarget]:
        held, self._held = self._held, None
        return held.target if held is not None else None

    def _release_on_shutdown(self) -> None:
        target = self._take_held()
        if target is not None:
            self._release(target)

    def _start(self, target: ActionTarget, hold: bool) -> None:
        if target.kind == ActionKind.CLICK:
            self._dispatch(self._sink.press_click if hold else self._sink.click_once)
        else:
            self._dispatch(self._sink.press_key if hold else self._sink.tap_key, target.token)

    def _release(self, target: ActionTarget) -> None:
        if target.kind == ActionKind.CLICK:
            self._dispatch(self._sink.release_click)
        else:
            self._dispatch(self._sink.release_key, target.token)

    @staticmethod
    def _dispatch(action: Callable[..., None], *args: Any) -> None:
        # Device calls are fire-and-forget; a failing backend must not kill the loop
        try:
            action(*args)
        except Exception as e:
            print(f"Device action failed: {e}")
