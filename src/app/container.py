# -*- coding: utf-8 -*-
"""
Application Container Module

The services of one running player, built by AppContainerFactory.

Only MainWindow keeps the container; widgets get the session and the event
bus passed in directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.event_bus import EventBus
    from services.config_service import ConfigService
    from services.file_picker import FilePickerService
    from services.playback_session import PlaybackSession


@dataclass
class AppContainer:
    """Service bundle

    Example:
        container = AppContainerFactory.create()
        window = MainWindow(container)
        ...
        container.cleanup()  # on exit
    """

    config: "ConfigService"
    event_bus: "EventBus"
    session: "PlaybackSession"
    file_picker: "FilePickerService"

    def cleanup(self) -> None:
        """Stop playback, release the audio engine and drop all subscriptions"""
        self.session.cleanup()
        self.event_bus.clear()
