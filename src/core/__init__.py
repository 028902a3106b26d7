"""
Sprite Player Core Module
"""

from .event_bus import EventBus, EventType
from .audio_engine import (
    AudioEngineBase, PygameAudioEngine, PlayerState,
    AudioEngineError, DecodeError, EngineUnavailableError,
)
from .engine_factory import AudioEngineFactory
from .progress_ticker import ProgressTicker, QtProgressTicker, ManualProgressTicker

__all__ = [
    'EventBus',
    'EventType',
    'AudioEngineBase',
    'PygameAudioEngine',
    'PlayerState',
    'AudioEngineError',
    'DecodeError',
    'EngineUnavailableError',
    'AudioEngineFactory',
    'ProgressTicker',
    'QtProgressTicker',
    'ManualProgressTicker',
]
