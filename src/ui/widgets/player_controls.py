"""
Player Control Component

Track title, artist placeholder, progress slider with mm:ss labels, and
previous / play-pause / next / import buttons.
"""

import logging

from PyQt6.QtWidgets import (
    QWidget, QHBoxLayout, QVBoxLayout, QLabel,
    QPushButton, QSlider
)
from PyQt6.QtCore import Qt, pyqtSignal, QSize

from core.audio_engine import AudioEngineError
from core.event_bus import EventBus, EventType
from models.playback import ProgressSnapshot, format_time
from services.playback_session import PlaybackSession
from ui.styles.theme_manager import ThemeManager

logger = logging.getLogger(__name__)

NOT_PLAYING_TITLE = "Not Playing"


class PlayerControls(QWidget):
    """
    Player Control Component

    Renders the session state and forwards user intents to it. All state is
    read back from the session; the widget keeps only the slider drag flag.
    """

    # Import button pressed; the window owns the file picker
    import_requested = pyqtSignal()

    def __init__(
        self,
        session: PlaybackSession,
        event_bus: EventBus,
        artist_placeholder: str = "Unknown Artist",
        parent=None,
    ):
        super().__init__(parent)
        self.session = session
        self.event_bus = event_bus
        self._artist_placeholder = artist_placeholder
        self._subscriptions: list = []
        self._slider_dragging = False

        self.setObjectName("playerControls")

        self._setup_ui()
        self._connect_signals()
        self.refresh()

    def _setup_ui(self):
        """Set up UI"""
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(24, 8, 24, 16)
        main_layout.setSpacing(8)

        # Track information
        self.title_label = QLabel(NOT_PLAYING_TITLE)
        self.title_label.setObjectName("trackTitle")
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        main_layout.addWidget(self.title_label)

        self.artist_label = QLabel(self._artist_placeholder)
        self.artist_label.setObjectName("trackArtist")
        self.artist_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        main_layout.addWidget(self.artist_label)

        # Progress slider, in milliseconds of the current track
        self.progress_slider = QSlider(Qt.Orientation.Horizontal)
        self.progress_slider.setMinimum(0)
        self.progress_slider.setMaximum(0)
        self.progress_slider.setCursor(Qt.CursorShape.PointingHandCursor)
        self.progress_slider.sliderPressed.connect(self._on_slider_pressed)
        self.progress_slider.sliderMoved.connect(self._on_slider_moved)
        self.progress_slider.sliderReleased.connect(self._on_slider_released)
        main_layout.addWidget(self.progress_slider)

        time_row = QHBoxLayout()
        self.current_time_label = QLabel(format_time(0))
        self.current_time_label.setObjectName("timeLabel")
        self.total_time_label = QLabel(format_time(0))
        self.total_time_label.setObjectName("timeLabel")
        self.total_time_label.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        time_row.addWidget(self.current_time_label)
        time_row.addStretch(1)
        time_row.addWidget(self.total_time_label)
        main_layout.addLayout(time_row)

        main_layout.addWidget(self._create_button_controls())

    def _create_button_controls(self) -> QWidget:
        """Create transport button row"""
        widget = QWidget()
        layout = QHBoxLayout(widget)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(20)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.prev_btn = self._make_button("previous", "Previous", 36, 24)
        self.prev_btn.clicked.connect(self.skip_previous)
        layout.addWidget(self.prev_btn)

        # Play/Pause button (Hero Button)
        self.play_btn = QPushButton()
        self.play_btn.setIcon(ThemeManager.get_icon("play"))
        self.play_btn.setIconSize(QSize(28, 28))
        self.play_btn.setObjectName("PlayPauseButton")
        self.play_btn.setToolTip("Play")
        self.play_btn.setFixedSize(48, 48)
        self.play_btn.clicked.connect(self.toggle_playback)
        layout.addWidget(self.play_btn)

        self.next_btn = self._make_button("next", "Next", 36, 24)
        self.next_btn.clicked.connect(self.skip_next)
        layout.addWidget(self.next_btn)

        self.import_btn = self._make_button("import", "Import audio files", 36, 20)
        self.import_btn.clicked.connect(self.import_requested.emit)
        layout.addWidget(self.import_btn)

        return widget

    def _make_button(self, icon: str, tooltip: str, size: int, icon_size: int) -> QPushButton:
        button = QPushButton()
        button.setIcon(ThemeManager.get_icon(icon))
        button.setIconSize(QSize(icon_size, icon_size))
        button.setObjectName("controlButton")
        button.setToolTip(tooltip)
        button.setFixedSize(size, size)
        return button

    def _connect_signals(self):
        """Connect event signals."""
        for event_type in (
            EventType.PLAYLIST_CHANGED,
            EventType.TRACK_LOADED,
            EventType.TRACK_STARTED,
            EventType.TRACK_PAUSED,
            EventType.ERROR_OCCURRED,
        ):
            self._subscriptions.append(
                self.event_bus.subscribe(event_type, self._on_session_changed)
            )
        self._subscriptions.append(
            self.event_bus.subscribe(EventType.POSITION_CHANGED, self._on_position_changed)
        )

    def cleanup(self):
        """Clean up event subscriptions (should be called before component destruction)."""
        for sub_id in self._subscriptions:
            self.event_bus.unsubscribe(sub_id)
        self._subscriptions.clear()

    # ===== Rendering =====

    def refresh(self):
        """Render everything from the session state."""
        track = self.session.current_track
        has_audio = self.session.progress.duration_seconds > 0

        self.title_label.setText(track.display_name if track and has_audio else NOT_PLAYING_TITLE)
        self.artist_label.setText(self._artist_placeholder)
        self._render_progress(self.session.progress)
        self._update_play_button()

        has_tracks = not self.session.is_empty
        self.prev_btn.setEnabled(has_tracks)
        self.next_btn.setEnabled(has_tracks)
        self.play_btn.setEnabled(has_tracks)
        self.progress_slider.setEnabled(has_audio)

    def _render_progress(self, progress: ProgressSnapshot):
        self.progress_slider.setMaximum(int(progress.duration_seconds * 1000))
        self.total_time_label.setText(progress.duration_str)
        if self._slider_dragging:
            return
        self.progress_slider.setValue(int(progress.current_seconds * 1000))
        self.current_time_label.setText(progress.current_str)

    def _update_play_button(self):
        """Update play button state and tooltip."""
        if self.session.is_playing:
            self.play_btn.setIcon(ThemeManager.get_icon("pause"))
            self.play_btn.setToolTip("Pause")
        else:
            self.play_btn.setIcon(ThemeManager.get_icon("play"))
            self.play_btn.setToolTip("Play")

    def _on_session_changed(self, _=None):
        self.refresh()

    def _on_position_changed(self, progress: ProgressSnapshot):
        self._render_progress(progress)

    # ===== User intents =====

    def toggle_playback(self):
        """Play or pause the current track."""
        self.session.toggle_play_pause()

    def skip_previous(self):
        """Go to the previous track and play it."""
        self._skip(self.session.previous_track)

    def skip_next(self):
        """Go to the next track and play it."""
        self._skip(self.session.next_track)

    def _skip(self, action):
        try:
            action()
        except AudioEngineError as e:
            # Reported through ERROR_OCCURRED; just leave the controls consistent
            logger.debug("Skip stopped on a track that could not be loaded: %s", e)
            self.refresh()

    def _on_slider_pressed(self):
        """Handle progress slider press."""
        self._slider_dragging = True

    def _on_slider_moved(self, value: int):
        """Preview the drag position in the elapsed label."""
        self.current_time_label.setText(format_time(value / 1000))

    def _on_slider_released(self):
        """Handle progress slider release."""
        self._slider_dragging = False
        self.session.seek(self.progress_slider.value() / 1000)
