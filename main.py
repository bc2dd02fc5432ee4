"""
Main entry point for the Multi Auto Clicker application.

Wires the shared session state into the hotkey listener, the action
scheduler and the GUI. All three run concurrently and share one stop event.
"""

import sys
import threading
import tkinter as tk
from tkinter import messagebox

from action_scheduler import ActionScheduler
from device_actions import DeviceActionSink
from gui import AutoClickerGUI
from hotkey_manager import HotkeyListener
from models import ApplicationSettings
from session_state import SessionState


def _enable_high_dpi_awareness() -> None:
    if not sys.platform.startswith("win"):
        return

    try:
        import ctypes

        try:
            ctypes.windll.shcore.SetProcessDpiAwareness(2)
            return
        except AttributeError:
            pass

        try:
            ctypes.windll.user32.SetProcessDPIAware()
        except AttributeError:
            pass
    except OSError:
        # Tk falls back to its default scaling
        pass


def _report_startup_failure(exc: Exception) -> None:
    message = f"Failed to start GUI: {exc}"
    print(message, file=sys.stderr)
    try:
        messagebox.showerror("Auto Clicker Error", message)
    except tk.TclError:
        pass


def main() -> int:
    """Application entry point; returns the process exit code."""
    settings = ApplicationSettings()
    state = SessionState(settings)
    stop_event = threading.Event()

    listener = HotkeyListener(
        state,
        stop_event,
        inject_hotkey=settings.inject_hotkey,
        click_hotkey=settings.click_hotkey,
        stop_hotkey=settings.stop_hotkey,
    )
    scheduler = ActionScheduler(state, DeviceActionSink(), stop_event)

    def shutdown() -> None:
        stop_event.set()
        listener.stop()
        scheduler.stop()

    listener.start()
    scheduler.start()

    _enable_high_dpi_awareness()
    try:
        root = tk.Tk()
        AutoClickerGUI(root, state, on_close=shutdown)
    except tk.TclError as exc:
        shutdown()
        _report_startup_failure(exc)
        return 1

    try:
        root.mainloop()
    finally:
        shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
