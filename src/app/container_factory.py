# -*- coding: utf-8 -*-
"""
Container Factory Module

Responsible for creating and assembling all application dependencies.

This is the **only** instance creation point (Composition Root) for the application.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from app.container import AppContainer
    from core.audio_engine import AudioEngineBase
    from services.file_picker import FilePickerService

logger = logging.getLogger(__name__)


class AppContainerFactory:
    """Application Container Factory

    Usage Example:
        # In main.py
        container = AppContainerFactory.create(use_qt_timer=True)
        window = MainWindow(container)

        # In tests (no Qt event loop, ticks fired by hand)
        container = AppContainerFactory.create(
            config_path=tmp_config,
            use_qt_timer=False,
            engine_factory=FakeEngine,
        )
    """

    @staticmethod
    def create(
        config_path: Optional[str] = None,
        use_qt_timer: bool = True,
        engine_factory: Optional[Callable[[], "AudioEngineBase"]] = None,
        file_picker: Optional["FilePickerService"] = None,
    ) -> "AppContainer":
        """Create Application Container

        Args:
            config_path: Configuration file path (None for the default locations)
            use_qt_timer: True to drive ticks from a QTimer, False for a
                          manually fired ticker (tests/headless)
            engine_factory: Override for the audio engine constructor
            file_picker: Override for the file picker

        Returns:
            A configured AppContainer instance
        """
        from app.container import AppContainer
        from core.engine_factory import AudioEngineFactory
        from core.event_bus import EventBus
        from core.progress_ticker import ManualProgressTicker, QtProgressTicker
        from services.config_service import ConfigService
        from services.file_picker import QtFilePickerService
        from services.playback_session import PlaybackSession

        logger.info("Creating application container...")

        # === 1. Infrastructure Layer ===
        config = ConfigService(config_path)
        event_bus = EventBus()

        # === 2. Audio backend ===
        if engine_factory is None:
            backend = config.get("audio.backend", "miniaudio")
            engine_factory = AudioEngineFactory.factory_for(backend)
            logger.info("Audio backend requested: %s (available: %s)",
                        backend, ", ".join(AudioEngineFactory.get_available_backends()) or "none")

        # === 3. Ticker ===
        interval_ms = int(config.get("playback.tick_interval_ms", 500))
        ticker_class = QtProgressTicker if use_qt_timer else ManualProgressTicker

        def ticker_factory(callback):
            return ticker_class(callback, interval_ms)

        # === 4. Session ===
        session = PlaybackSession(
            engine_factory=engine_factory,
            ticker_factory=ticker_factory,
            event_bus=event_bus,
        )

        # === 5. File picker ===
        if file_picker is None:
            file_picker = QtFilePickerService(
                config.get("library.supported_formats", ["mp3", "wav"])
            )

        logger.info("Application container created")
        return AppContainer(
            config=config,
            event_bus=event_bus,
            session=session,
            file_picker=file_picker,
        )
