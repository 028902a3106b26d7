"""
Audio Engine Factory

Maps backend names to engine classes. The playback session builds a new
engine for every track it loads, so the factory mostly hands out
constructors (factory_for) rather than engines.
"""

import logging
from typing import Callable, Dict, Iterator, List, Optional, Type

from core.audio_engine import AudioEngineBase, EngineUnavailableError, PygameAudioEngine

logger = logging.getLogger(__name__)

_ENGINE_REGISTRY: Dict[str, Type[AudioEngineBase]] = {}


def register_engine(name: str, engine_class: Type[AudioEngineBase]) -> None:
    """Make an engine class available under a backend name"""
    _ENGINE_REGISTRY[name] = engine_class


def unregister_engine(name: str) -> None:
    """Remove a backend (no-op if it was never registered)"""
    _ENGINE_REGISTRY.pop(name, None)


register_engine("pygame", PygameAudioEngine)

# miniaudio is an optional native extension; pygame is always registered
try:
    from core.miniaudio_engine import MiniaudioEngine
    register_engine("miniaudio", MiniaudioEngine)
except ImportError:
    logger.debug("miniaudio backend unavailable")


class AudioEngineFactory:
    """
    Audio Engine Factory

    Example:
        engine = AudioEngineFactory.create("pygame")
        make_engine = AudioEngineFactory.factory_for("miniaudio")
        session = PlaybackSession(make_engine, ticker_factory)
    """

    # Fallback order when the requested backend cannot be built
    PRIORITY_ORDER = ["miniaudio", "pygame"]

    @classmethod
    def create(cls, backend: str = "miniaudio") -> AudioEngineBase:
        """
        Build an engine for `backend`, or for the best other backend if that fails

        Raises:
            EngineUnavailableError: If no registered backend can be built
        """
        engine_class = _ENGINE_REGISTRY.get(backend)
        if engine_class is not None:
            try:
                return engine_class()
            except Exception as e:
                logger.warning("Audio backend %s failed to start (%s), falling back", backend, e)
        else:
            logger.warning("Unknown audio backend %r, falling back", backend)

        return cls.create_best_available(exclude=[backend])

    @classmethod
    def create_best_available(cls, exclude: Optional[List[str]] = None) -> AudioEngineBase:
        """
        Build the first backend that starts, in priority order

        Backends registered outside PRIORITY_ORDER are tried last.

        Raises:
            EngineUnavailableError: If none of the candidates can be built
        """
        skipped = set(exclude or ())
        for name in cls._candidates():
            if name in skipped:
                continue
            try:
                engine = _ENGINE_REGISTRY[name]()
            except Exception as e:
                logger.debug("Audio backend %s unavailable: %s", name, e)
                continue
            logger.info("Using audio backend: %s", name)
            return engine

        raise EngineUnavailableError("No audio backend could be started (install miniaudio or pygame)")

    @classmethod
    def _candidates(cls) -> Iterator[str]:
        for name in cls.PRIORITY_ORDER:
            if name in _ENGINE_REGISTRY:
                yield name
        for name in list(_ENGINE_REGISTRY):
            if name not in cls.PRIORITY_ORDER:
                yield name

    @classmethod
    def factory_for(cls, backend: str) -> Callable[[], AudioEngineBase]:
        """Zero-argument constructor for `backend`, with the same fallback as create()"""
        def create_engine() -> AudioEngineBase:
            return cls.create(backend)

        return create_engine

    @classmethod
    def get_available_backends(cls) -> List[str]:
        """Backends in PRIORITY_ORDER whose dependencies import"""
        return [name for name in cls.PRIORITY_ORDER if cls.is_available(name)]

    @classmethod
    def is_available(cls, backend: str) -> bool:
        """Whether `backend` is registered and its probe() passes"""
        engine_class = _ENGINE_REGISTRY.get(backend)
        if engine_class is None:
            return False
        try:
            return bool(engine_class.probe())
        except Exception as e:
            logger.debug("Probe for %s failed: %s", backend, e)
            return False
