"""
Main Window

The single application view: decorative sprite on top, player controls below,
and a small menu bar for import and transport shortcuts.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QMainWindow, QMessageBox, QVBoxLayout, QWidget

from core.audio_engine import AudioEngineError
from core.event_bus import EventType
from services.file_picker import FileHandle, TrackImportError
from ui.styles.theme_manager import ThemeManager
from ui.widgets.player_controls import PlayerControls
from ui.widgets.sprite_view import SpriteView

if TYPE_CHECKING:
    from app.container import AppContainer

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Main Window

    Design principles:
    - MainWindow holds the AppContainer; widgets only receive the session.
    - Errors from the session arrive as ERROR_OCCURRED and are shown once, here.
    """

    def __init__(self, container: "AppContainer"):
        """Initialize main window

        Args:
            container: Application dependency container
        """
        super().__init__()

        self._container = container
        self.config = container.config
        self.event_bus = container.event_bus
        self.session = container.session
        self.file_picker = container.file_picker
        if hasattr(self.file_picker, "set_parent"):
            self.file_picker.set_parent(self)

        self.setWindowTitle(self.config.get("app.name", "Sprite Player"))
        self.setStyleSheet(ThemeManager.get_stylesheet())

        self._setup_ui()
        self._setup_menu()
        self._error_subscription = self.event_bus.subscribe(
            EventType.ERROR_OCCURRED, self._on_error
        )
        self._restore_state()

    def _setup_ui(self):
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.sprite_view = SpriteView(self.config.get("ui.sprite_frame_interval_ms", 120))
        layout.addWidget(self.sprite_view, 1)

        self.player_controls = PlayerControls(
            self.session,
            self.event_bus,
            artist_placeholder=self.config.get("ui.artist_placeholder", "Unknown Artist"),
        )
        self.player_controls.import_requested.connect(self.request_import)
        layout.addWidget(self.player_controls)

        self.setCentralWidget(central)
        self.sprite_view.start()

    def _setup_menu(self):
        """Set up the menu bar."""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        import_action = QAction("Import Audio...", self)
        import_action.setShortcut(QKeySequence(self.config.get("shortcuts.import", "Ctrl+O")))
        import_action.triggered.connect(self.request_import)
        file_menu.addAction(import_action)

        file_menu.addSeparator()

        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        play_menu = menubar.addMenu("Playback")
        for label, key, default, handler in (
            ("Play/Pause", "shortcuts.play_pause", "Space", self.player_controls.toggle_playback),
            ("Next", "shortcuts.next_track", "Ctrl+Right", self.player_controls.skip_next),
            ("Previous", "shortcuts.previous_track", "Ctrl+Left", self.player_controls.skip_previous),
        ):
            action = QAction(label, self)
            action.setShortcut(QKeySequence(self.config.get(key, default)))
            action.triggered.connect(handler)
            play_menu.addAction(action)

    def _restore_state(self):
        """Restore window size"""
        width = self.config.get("ui.window_width", 420)
        height = self.config.get("ui.window_height", 560)
        self.resize(width, height)

    # ===== Import =====

    def request_import(self):
        """Run the file picker and import whatever was chosen."""
        self.import_handles(self.file_picker.pick_audio_files())

    def import_handles(self, handles: Sequence[FileHandle]) -> bool:
        """
        Import files into the session.

        Returns:
            bool: True if the import went through (including an empty selection)
        """
        try:
            self.session.import_tracks(handles)
        except (TrackImportError, AudioEngineError) as e:
            # Already logged and published by the session
            logger.debug("Import did not complete: %s", e)
            return False
        return True

    def _on_error(self, payload):
        message = payload.get("error", "Unknown error") if isinstance(payload, dict) else str(payload)
        QMessageBox.warning(self, "Playback Error", message)

    # ===== Window Event Overrides =====

    def closeEvent(self, event):
        """Stop animation, detach from the event bus, release audio"""
        self.sprite_view.stop()
        self.player_controls.cleanup()
        self.event_bus.unsubscribe(self._error_subscription)
        self._container.cleanup()
        super().closeEvent(event)
