"""
Graphical user interface for the Multi Auto Clicker application.

Key capabilities
----------------
- Configure the interval, hold mode and the comma separated key sequence
- Start clicking, start keystroke injection or stop everything
- Show the status line, the current key and the session log

The GUI never drives input devices itself; it only writes configuration and
mode changes into the shared SessionState and polls it for display.
"""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk, scrolledtext
from typing import Optional

from models import Mode
from session_state import SessionSnapshot, SessionState


class AutoClickerGUI:
    """Tkinter front end over the shared session state."""

    REFRESH_POLL_MS = 50
    WINDOW_SIZE = (420, 560)

    def __init__(self, root: tk.Tk, state: SessionState, on_close=None):
        self.root = root
        self.state = state
        self._on_close_callback = on_close
        self.root.title("Multi Auto Clicker")
        self.root.geometry(f"{self.WINDOW_SIZE[0]}x{self.WINDOW_SIZE[1]}")
        self.root.minsize(*self.WINDOW_SIZE)

        settings = state.settings
        snapshot = state.snapshot()

        self.style = ttk.Style()
        self._configure_styles()

        # Tk variables ---------------------------------------------------
        self.interval_var = tk.IntVar(value=snapshot.interval_ms)
        self.hold_mode_var = tk.BooleanVar(value=snapshot.hold_mode)
        self.key_text_var = tk.StringVar(value=snapshot.key_text)
        self.status_var = tk.StringVar(value=f"Status: {snapshot.status}")
        self.current_key_var = tk.StringVar(value="")

        self._settings = settings
        self._rendered_log_lines: tuple = ()
        self.refresh_job: Optional[str] = None

        self.interval_var.trace_add("write", lambda *_: self._on_interval_changed())
        self.hold_mode_var.trace_add("write", lambda *_: self.state.set_hold_mode(self.hold_mode_var.get()))
        self.key_text_var.trace_add("write", lambda *_: self.state.set_key_text(self.key_text_var.get()))

        # UI --------------------------------------------------------------
        self._build_ui()
        self._start_refresh()

        self.root.protocol("WM_DELETE_WINDOW", self._on_closing)

    def _configure_styles(self) -> None:
        try:
            self.style.theme_use("clam")
        except tk.TclError:
            pass

        self.style.configure(".", font=("Segoe UI", 10))
        self.style.configure("Header.TLabel", font=("Segoe UI", 15, "bold"))
        self.style.configure("CurrentKey.TLabel", font=("Segoe UI", 11, "bold"))
        self.style.configure("Card.TLabelframe", borderwidth=1, relief="solid")
        self.style.configure("Card.TLabelframe.Label", font=("Segoe UI", 11, "bold"))
        self.style.configure("Accent.TButton", padding=(10, 7))
        self.style.configure("Danger.TButton", padding=(10, 7), foreground="#a72c2c")
        self.style.configure("Hint.TLabel", font=("Segoe UI", 8))

    def _build_ui(self) -> None:
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        container = ttk.Frame(self.root, padding=12)
        container.grid(row=0, column=0, sticky="nsew")
        container.columnconfigure(0, weight=1)
        container.rowconfigure(2, weight=1)

        ttk.Label(container, text="Multi Auto Clicker", style="Header.TLabel").grid(
            row=0, column=0, sticky="w"
        )

        self._build_configuration_section(container, row=1)
        self._build_status_section(container, row=2)
        self._build_controls_section(container, row=3)

        ttk.Label(
            container,
            text=(
                "Works in the background. Hotkeys: "
                f"{self._settings.inject_hotkey}=Keys, "
                f"{self._settings.click_hotkey}=Click, "
                f"{self._settings.stop_hotkey}=Stop"
            ),
            style="Hint.TLabel",
        ).grid(row=4, column=0, sticky="w", pady=(8, 0))

    def _build_configuration_section(self, parent: ttk.Frame, row: int) -> None:
        frame = ttk.Frame(parent)
        frame.grid(row=row, column=0, sticky="ew", pady=(8, 4))
        frame.columnconfigure(3, weight=1)

        ttk.Label(frame, text="Interval (ms):").grid(row=0, column=0, sticky="w")
        ttk.Spinbox(
            frame,
            from_=self._settings.min_interval_ms,
            to=self._settings.max_interval_ms,
            increment=10,
            textvariable=self.interval_var,
            justify="right",
            width=7,
        ).grid(row=0, column=1, sticky="w", padx=(6, 12))

        ttk.Checkbutton(frame, text="Hold Mode", variable=self.hold_mode_var).grid(
            row=0, column=2, sticky="w"
        )
        ttk.Label(frame, textvariable=self.status_var).grid(row=0, column=3, sticky="e")

    def _build_status_section(self, parent: ttk.Frame, row: int) -> None:
        frame = ttk.LabelFrame(parent, text="Log", padding=8, style="Card.TLabelframe")
        frame.grid(row=row, column=0, sticky="nsew", pady=(4, 4))
        frame.columnconfigure(0, weight=1)
        frame.rowconfigure(0, weight=1)

        self.log_text = scrolledtext.ScrolledText(
            frame, height=10, state=tk.DISABLED, wrap=tk.WORD, font=("Consolas", 9)
        )
        self.log_text.grid(row=0, column=0, sticky="nsew")

        self.current_key_label = ttk.Label(frame, textvariable=self.current_key_var, style="CurrentKey.TLabel")
        self.current_key_label.grid(row=1, column=0, sticky="w", pady=(6, 0))

        ttk.Button(frame, text="Clear log", command=self.state.clear_log).grid(
            row=1, column=0, sticky="e", pady=(6, 0)
        )

    def _build_controls_section(self, parent: ttk.Frame, row: int) -> None:
        frame = ttk.LabelFrame(parent, text="Controls", padding=10, style="Card.TLabelframe")
        frame.grid(row=row, column=0, sticky="ew")
        frame.columnconfigure(1, weight=1)

        ttk.Button(
            frame,
            text=f"Start Clicking ({self._settings.click_hotkey})",
            command=lambda: self.state.start_clicking("button"),
            style="Accent.TButton",
        ).grid(row=0, column=0, columnspan=2, sticky="ew", pady=(0, 8))

        ttk.Label(frame, text="Keys:").grid(row=1, column=0, sticky="w")
        ttk.Entry(frame, textvariable=self.key_text_var).grid(row=1, column=1, sticky="ew", padx=(6, 0))
        ttk.Label(
            frame,
            text="Separate keys with commas, e.g. 'w, s, d' or 'space, enter'",
            style="Hint.TLabel",
        ).grid(row=2, column=0, columnspan=2, sticky="w")

        ttk.Button(
            frame,
            text=f"Start Keystroke Injection ({self._settings.inject_hotkey})",
            command=lambda: self.state.start_key_injection("button"),
            style="Accent.TButton",
        ).grid(row=3, column=0, columnspan=2, sticky="ew", pady=(6, 8))

        ttk.Button(
            frame,
            text=f"Stop All ({self._settings.stop_hotkey})",
            command=lambda: self.state.stop("button"),
            style="Danger.TButton",
        ).grid(row=4, column=0, columnspan=2, sticky="ew")

    def _on_interval_changed(self) -> None:
        try:
            value = int(self.interval_var.get())
        except (tk.TclError, ValueError):
            # Half-typed spinbox content; keep the last valid interval
            return
        self.state.set_interval_ms(value)

    def _start_refresh(self) -> None:
        def poll() -> None:
            self._render(self.state.snapshot())
            self.refresh_job = self.root.after(self.REFRESH_POLL_MS, poll)

        poll()

    def _render(self, snapshot: SessionSnapshot) -> None:
        self.status_var.set(f"Status: {snapshot.status}")

        if snapshot.mode == Mode.INJECTING_KEYS and snapshot.displayed_key:
            self.current_key_var.set(f"Current key: {snapshot.displayed_key}")
        else:
            self.current_key_var.set("")

        lines = snapshot.log_lines
        if lines == self._rendered_log_lines:
            return

        # The logger trims old entries, so redraw the whole trail on change
        self.log_text.configure(state=tk.NORMAL)
        self.log_text.delete("1.0", tk.END)
        if lines:
            self.log_text.insert(tk.END, "\n".join(lines) + "\n")
        self.log_text.see(tk.END)
        self.log_text.configure(state=tk.DISABLED)
        self._rendered_log_lines = lines

    def _on_closing(self) -> None:
        if self.refresh_job:
            self.root.after_cancel(self.refresh_job)
            self.refresh_job = None
        if self._on_close_callback:
            self._on_close_callback()
        self.root.destroy()
