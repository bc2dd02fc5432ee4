import pytest

from models import ApplicationSettings
from session_state import SessionState


class RecordingSink:
    """Device sink double that records every call in order."""

    def __init__(self):
        self.calls = []

    def press_click(self):
        self.calls.append(("press_click",))

    def release_click(self):
        self.calls.append(("release_click",))

    def click_once(self):
        self.calls.append(("click_once",))

    def press_key(self, token):
        self.calls.append(("press_key", token))

    def release_key(self, token):
        self.calls.append(("release_key", token))

    def tap_key(self, token):
        self.calls.append(("tap_key", token))


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def state(clock):
    return SessionState(ApplicationSettings(), clock=clock)
