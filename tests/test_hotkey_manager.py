import threading
import time
from types import SimpleNamespace

import pytest

import hotkey_manager
from hotkey_manager import HotkeyListener
from models import Mode


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while not predicate() and time.monotonic() < deadline:
        time.sleep(0.005)
    return predicate()


def test_hotkeys_change_mode(state):
    listener = HotkeyListener(state, threading.Event())

    assert listener.handle_key("f6") is True
    assert state.mode == Mode.CLICKING

    assert listener.handle_key("f5") is True
    assert state.mode == Mode.INJECTING_KEYS
    assert state.displayed_key == "w"

    assert listener.handle_key("f7") is True
    assert state.mode == Mode.IDLE

    messages = [entry.message for entry in state.logger.get_all_logs()]
    assert messages == [
        "Started clicking! (F6)",
        "Started injecting keys 'w, s' (F5)",
        "Stopped all actions (F7)",
    ]


def test_other_keys_are_ignored(state):
    listener = HotkeyListener(state, threading.Event())
    assert listener.handle_key("a") is False
    assert listener.handle_key(None) is False
    assert state.mode == Mode.IDLE
    assert len(state.logger) == 0


def test_inject_hotkey_with_empty_sequence_is_rejected(state):
    listener = HotkeyListener(state, threading.Event())
    state.set_key_text("")
    assert listener.handle_key("f5") is True
    assert state.mode == Mode.IDLE
    [entry] = state.logger.get_all_logs()
    assert entry.message == "Cannot inject empty key sequence!"


def test_stop_event_disables_hotkeys(state):
    stop_event = threading.Event()
    listener = HotkeyListener(state, stop_event)
    stop_event.set()
    assert listener.handle_key("f6") is False
    assert listener._on_press(SimpleNamespace(name="f6")) is False
    assert state.mode == Mode.IDLE


def test_custom_hotkeys(state):
    listener = HotkeyListener(state, threading.Event(), inject_hotkey="<f8>", click_hotkey="F9", stop_hotkey="x")
    assert listener.handle_key("f9") is True
    assert state.mode == Mode.CLICKING
    assert listener.handle_key("x") is True
    assert state.mode == Mode.IDLE
    assert listener.handle_key("f6") is False


def test_duplicate_or_empty_hotkeys_rejected(state):
    with pytest.raises(ValueError):
        HotkeyListener(state, inject_hotkey="F6", click_hotkey="F6")
    with pytest.raises(ValueError):
        HotkeyListener(state, stop_hotkey=" ")


@pytest.mark.parametrize(
    "key,expected",
    (
        (SimpleNamespace(name="f5"), "f5"),
        (SimpleNamespace(char="A"), "a"),
        (SimpleNamespace(char=None), None),
        (object(), None),
    ),
)
def test_key_name(key, expected):
    assert HotkeyListener.key_name(key) == expected


class FakeListener:
    """Stands in for pynput.keyboard.Listener; delivers one F6 press."""

    def __init__(self, on_press):
        self.on_press = on_press
        self.stopped = threading.Event()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.stop()

    def stop(self):
        self.stopped.set()

    def join(self):
        self.on_press(SimpleNamespace(name="f6"))
        self.stopped.wait(2.0)


def test_listener_thread_dispatches_events(state, monkeypatch):
    monkeypatch.setattr(hotkey_manager, "keyboard", SimpleNamespace(Listener=FakeListener))
    listener = HotkeyListener(state, threading.Event())

    assert listener.start() is True
    assert wait_for(lambda: state.mode == Mode.CLICKING)

    listener.stop()
    assert not listener.is_running()
    assert all(entry.level == "INFO" for entry in state.logger.get_all_logs())


def test_listener_start_failure_is_logged(state, monkeypatch):
    def broken_listener(on_press):
        raise OSError("no display")

    monkeypatch.setattr(hotkey_manager, "keyboard", SimpleNamespace(Listener=broken_listener))
    state.start_clicking()
    listener = HotkeyListener(state, threading.Event())

    listener.start()
    assert wait_for(lambda: not listener.is_running())

    entries = state.logger.get_all_logs()
    assert entries[-1].level == "ERROR"
    assert entries[-1].message == "Hotkey listener error: no display"
    assert state.mode == Mode.CLICKING


def test_missing_backend_is_logged(state, monkeypatch):
    monkeypatch.setattr(hotkey_manager, "keyboard", None)
    listener = HotkeyListener(state, threading.Event())

    listener.start()
    assert wait_for(lambda: not listener.is_running())

    [entry] = state.logger.get_all_logs()
    assert entry.level == "ERROR"
    assert entry.message.startswith("Hotkey listener error: pynput/keyboard backend not available")


def test_listener_error_mid_stream_is_logged(state, monkeypatch):
    class CrashingListener(FakeListener):
        def join(self):
            raise RuntimeError("listener crashed")

    monkeypatch.setattr(hotkey_manager, "keyboard", SimpleNamespace(Listener=CrashingListener))
    listener = HotkeyListener(state, threading.Event())

    listener.start()
    assert wait_for(lambda: not listener.is_running())

    [entry] = state.logger.get_all_logs()
    assert entry.message == "Hotkey listener error: listener crashed"
