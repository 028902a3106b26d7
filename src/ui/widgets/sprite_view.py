"""
Decorative Sprite Component

A small looping equalizer-bar animation shown above the controls. It runs on
its own timer and has no link to playback state.
"""

import math

from PyQt6.QtCore import QRectF, QTimer, Qt
from PyQt6.QtGui import QColor, QPainter
from PyQt6.QtWidgets import QSizePolicy, QWidget

from ui.resources.design_tokens import tokens

BAR_COUNT = 7
FRAMES_PER_LOOP = 24


def bar_heights(frame: int, bar_count: int = BAR_COUNT) -> list:
    """Relative bar heights in (0, 1] for a given animation frame."""
    phase = (frame % FRAMES_PER_LOOP) / FRAMES_PER_LOOP * 2 * math.pi
    return [
        0.2 + 0.8 * (0.5 + 0.5 * math.sin(phase + i * 0.9))
        for i in range(bar_count)
    ]


class SpriteView(QWidget):
    """Animated equalizer sprite"""

    def __init__(self, frame_interval_ms: int = 120, parent=None):
        super().__init__(parent)
        self._frame = 0
        self.setMinimumHeight(160)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

        self._timer = QTimer(self)
        self._timer.setInterval(max(16, frame_interval_ms))
        self._timer.timeout.connect(self.advance)

    @property
    def frame(self) -> int:
        return self._frame

    @property
    def is_animating(self) -> bool:
        return self._timer.isActive()

    def start(self):
        self._timer.start()

    def stop(self):
        self._timer.stop()

    def advance(self):
        """Step to the next frame and repaint."""
        self._frame = (self._frame + 1) % FRAMES_PER_LOOP
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setPen(Qt.PenStyle.NoPen)

        heights = bar_heights(self._frame)
        gap = tokens.SPACING_2
        usable = self.width() - gap * (len(heights) + 1)
        bar_width = max(4.0, usable / len(heights))
        max_height = self.height() - 2 * tokens.SPACING_4

        for i, fraction in enumerate(heights):
            height = max_height * fraction
            x = gap + i * (bar_width + gap)
            y = self.height() - tokens.SPACING_4 - height
            painter.setBrush(QColor(tokens.SPRITE_COLORS[i % len(tokens.SPRITE_COLORS)]))
            painter.drawRoundedRect(QRectF(x, y, bar_width, height), 4, 4)

        painter.end()
