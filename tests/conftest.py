"""
Test Configuration File

Unified setup for Python path, avoiding sys.path.insert in each test file.
Provides the QApplication fixture required for PyQt6 tests and the fake
engine/file handles used by the session tests.
"""

import io
import os
import sys
from contextlib import contextmanager
from pathlib import Path

import pytest

# Qt widgets are created without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
# pygame.mixer opens without an audio device
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

# Add the src directory to the Python path
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from core.audio_engine import (  # noqa: E402
    AudioEngineBase, DecodeError, EngineUnavailableError, PlayerState,
)
from services.file_picker import FileHandle, ImportPermissionError  # noqa: E402

DEFAULT_FAKE_DURATION = 100.0


class FakeEngine(AudioEngineBase):
    """In-memory engine: bytes starting with b"BAD" fail to decode."""

    def __init__(self, duration: float = DEFAULT_FAKE_DURATION):
        super().__init__()
        self._default_duration = duration
        self.position = 0.0
        self.loaded_data = None
        self.name_hint = None
        self.cleaned_up = False
        self.calls = []

    def load(self, data: bytes, name_hint: str = "") -> None:
        self.calls.append("load")
        if data.startswith(b"BAD"):
            self._state = PlayerState.ERROR
            raise DecodeError("not audio", name_hint)
        self.loaded_data = data
        self.name_hint = name_hint
        self._duration = self._default_duration
        self._state = PlayerState.STOPPED

    def play(self) -> None:
        self.calls.append("play")
        self._state = PlayerState.PLAYING

    def pause(self) -> None:
        self.calls.append("pause")
        self._state = PlayerState.PAUSED

    def stop(self) -> None:
        self.calls.append("stop")
        self.position = 0.0
        if self.is_loaded:
            self._state = PlayerState.STOPPED

    def set_position(self, seconds: float) -> None:
        self.calls.append(("set_position", seconds))
        self.position = seconds

    def get_position(self) -> float:
        return self.position

    def cleanup(self) -> None:
        self.calls.append("cleanup")
        self.cleaned_up = True
        self._state = PlayerState.IDLE

    def get_engine_name(self) -> str:
        return "fake"


class EngineRecorder:
    """
    Engine factory that remembers every engine it created.

    With `limit` set, calls beyond the first `limit` engines raise
    EngineUnavailableError, like a machine whose output device went away.
    """

    def __init__(self, duration: float = DEFAULT_FAKE_DURATION, limit: int = None):
        self.duration = duration
        self.limit = limit
        self.engines = []
        # Engines not yet cleaned up at the moment each new one was built
        self.live_at_creation = []

    def __call__(self) -> FakeEngine:
        if self.limit is not None and len(self.engines) >= self.limit:
            raise EngineUnavailableError("no output device")
        self.live_at_creation.append(sum(1 for e in self.engines if not e.cleaned_up))
        engine = FakeEngine(self.duration)
        self.engines.append(engine)
        return engine

    @property
    def current(self) -> FakeEngine:
        return self.engines[-1]


class FakeHandle(FileHandle):
    """File handle serving fixed bytes, optionally denying access."""

    def __init__(self, name: str, data: bytes = None, denied: bool = False):
        self._name = name
        self._data = data if data is not None else f"audio:{name}".encode()
        self._denied = denied
        self.acquired = 0
        self.released = 0

    @property
    def display_name(self) -> str:
        return self._name

    @contextmanager
    def open_scoped(self):
        if self._denied:
            raise ImportPermissionError(self._name, "permission denied")
        self.acquired += 1
        try:
            yield io.BytesIO(self._data)
        finally:
            self.released += 1


@pytest.fixture(scope="session")
def qapp():
    """
    Create QApplication for all tests.

    Uses session scope to avoid creating multiple QApplication instances.
    """
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def event_bus():
    """Fresh EventBus singleton per test"""
    from core.event_bus import EventBus

    EventBus.reset_instance()
    bus = EventBus()
    yield bus
    bus.clear()
    EventBus.reset_instance()


@pytest.fixture
def engines():
    """Recording engine factory"""
    return EngineRecorder()


@pytest.fixture
def session(engines, event_bus):
    """PlaybackSession over fake engines with a manually fired ticker"""
    from core.progress_ticker import ManualProgressTicker
    from services.playback_session import PlaybackSession

    return PlaybackSession(
        engine_factory=engines,
        ticker_factory=lambda callback: ManualProgressTicker(callback, 500),
        event_bus=event_bus,
    )


@pytest.fixture
def make_handles():
    """Build FakeHandles from names"""
    def _make(*names):
        return [FakeHandle(name) for name in names]
    return _make
