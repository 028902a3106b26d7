"""
Progress Ticker Module

Repeating timer that drives periodic re-sampling of the playback position.

Every start() opens a new generation; a timeout that was already queued for an
older generation is dropped instead of being delivered. A tick that races a
track switch therefore never reaches the new track.
"""

from abc import ABC, abstractmethod
from typing import Callable
import logging

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 500


class ProgressTicker(ABC):
    """
    Abstract repeating ticker

    Example:
        ticker = QtProgressTicker(session.on_tick, interval_ms=500)
        ticker.start()   # on_tick every 500ms
        ticker.start()   # restarts the schedule, never runs two in parallel
        ticker.stop()
    """

    def __init__(self, callback: Callable[[], None], interval_ms: int = DEFAULT_INTERVAL_MS):
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self._callback = callback
        self._interval_ms = interval_ms
        self._generation = 0
        self._running = False

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def is_running(self) -> bool:
        """Whether a schedule is active"""
        return self._running

    @property
    def generation(self) -> int:
        """Number of times start() has been called"""
        return self._generation

    def start(self) -> None:
        """Begin (or restart) periodic invocation of the callback"""
        if self._running:
            self._cancel()
        self._generation += 1
        self._running = True
        self._schedule(self._generation)

    def stop(self) -> None:
        """Cancel periodic invocation; no-op if not running"""
        if not self._running:
            return
        self._cancel()
        self._running = False

    def _fire(self, generation: int) -> None:
        """Deliver one tick if it belongs to the live schedule"""
        if not self._running or generation != self._generation:
            logger.debug("Dropping stale tick (generation %d, current %d)", generation, self._generation)
            return
        self._callback()

    @abstractmethod
    def _schedule(self, generation: int) -> None:
        """Arrange for _fire(generation) to be called every interval"""
        pass

    @abstractmethod
    def _cancel(self) -> None:
        """Cancel the active schedule"""
        pass


class QtProgressTicker(ProgressTicker):
    """Ticker backed by a QTimer on the Qt main thread"""

    def __init__(self, callback: Callable[[], None], interval_ms: int = DEFAULT_INTERVAL_MS):
        super().__init__(callback, interval_ms)
        self._timer = None

    def _schedule(self, generation: int) -> None:
        from PyQt6.QtCore import QTimer

        timer = QTimer()
        timer.setInterval(self._interval_ms)
        timer.timeout.connect(lambda: self._fire(generation))
        timer.start()
        self._timer = timer

    def _cancel(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None


class ManualProgressTicker(ProgressTicker):
    """
    Ticker driven by explicit fire() calls

    Used headless and in tests, where ticks must be deterministic.
    """

    def __init__(self, callback: Callable[[], None], interval_ms: int = DEFAULT_INTERVAL_MS):
        super().__init__(callback, interval_ms)
        self._scheduled_generation = 0

    def _schedule(self, generation: int) -> None:
        self._scheduled_generation = generation

    def _cancel(self) -> None:
        self._scheduled_generation = 0

    def fire(self, times: int = 1) -> None:
        """Deliver `times` ticks to the current schedule"""
        for _ in range(times):
            self._fire(self._scheduled_generation)

    def fire_stale(self, generation: int) -> None:
        """Deliver a tick tagged with an arbitrary (possibly old) generation"""
        self._fire(generation)
