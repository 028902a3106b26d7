from PyQt6.QtGui import QIcon
from PyQt6.QtWidgets import QApplication, QStyle

from ui.resources.design_tokens import tokens


class ThemeManager:
    """
    Builds the player stylesheet from DesignTokens and resolves control icons.

    Widgets only set object names (#trackTitle, #PlayPauseButton, ...); the
    single stylesheet applied on the main window styles them all.
    """

    _ICONS = {
        "play": QStyle.StandardPixmap.SP_MediaPlay,
        "pause": QStyle.StandardPixmap.SP_MediaPause,
        "previous": QStyle.StandardPixmap.SP_MediaSkipBackward,
        "next": QStyle.StandardPixmap.SP_MediaSkipForward,
        "import": QStyle.StandardPixmap.SP_DialogOpenButton,
    }

    @staticmethod
    def get_icon(name: str) -> QIcon:
        """Platform media icon for a control name (empty icon if unknown)."""
        pixmap = ThemeManager._ICONS.get(name)
        if pixmap is None:
            return QIcon()
        return QApplication.style().standardIcon(pixmap)

    @staticmethod
    def get_stylesheet() -> str:
        """Stylesheet for the main window and everything inside it."""
        return "\n".join((
            ThemeManager._base_rules(),
            ThemeManager._slider_rules(),
            ThemeManager._button_rules(),
            ThemeManager._label_rules(),
        ))

    @staticmethod
    def _base_rules() -> str:
        return f"""
        QMainWindow, QWidget {{
            background-color: {tokens.NEUTRAL_900};
            color: {tokens.NEUTRAL_200};
            font-family: {tokens.FONT_FAMILY};
            font-size: {tokens.FONT_SIZE_BASE}px;
        }}
        QMenuBar, QMenu {{
            background-color: {tokens.NEUTRAL_800};
            color: {tokens.NEUTRAL_200};
        }}
        QMenu::item:selected, QMenuBar::item:selected {{
            background-color: {tokens.NEUTRAL_750};
        }}
        QToolTip {{
            background-color: {tokens.NEUTRAL_800};
            color: {tokens.NEUTRAL_200};
            border: 1px solid {tokens.NEUTRAL_600};
            padding: 4px 8px;
            border-radius: {tokens.RADIUS_SM}px;
            font-size: {tokens.FONT_SIZE_XS}px;
        }}
        """

    @staticmethod
    def _slider_rules() -> str:
        # Seek slider: thin groove, accent fill up to the handle
        return f"""
        QSlider::groove:horizontal {{
            height: 4px;
            background: {tokens.NEUTRAL_700};
            border-radius: 2px;
        }}
        QSlider::sub-page:horizontal {{
            background: {tokens.PRIMARY_500};
            border-radius: 2px;
        }}
        QSlider::sub-page:horizontal:disabled {{
            background: {tokens.NEUTRAL_600};
        }}
        QSlider::handle:horizontal {{
            background: {tokens.NEUTRAL_200};
            width: 12px;
            margin: -4px 0;
            border-radius: 6px;
        }}
        """

    @staticmethod
    def _button_rules() -> str:
        return f"""
        QPushButton#PlayPauseButton {{
            background-color: {tokens.PRIMARY_500};
            border: none;
            border-radius: 24px;
        }}
        QPushButton#PlayPauseButton:hover {{ background-color: {tokens.PRIMARY_600}; }}
        QPushButton#PlayPauseButton:pressed {{ background-color: {tokens.PRIMARY_700}; }}
        QPushButton#PlayPauseButton:disabled {{ background-color: {tokens.NEUTRAL_700}; }}

        QPushButton#controlButton {{
            background-color: transparent;
            border: none;
            border-radius: {tokens.RADIUS_MD}px;
        }}
        QPushButton#controlButton:hover {{ background-color: {tokens.NEUTRAL_750}; }}
        """

    @staticmethod
    def _label_rules() -> str:
        return f"""
        QLabel#trackTitle {{
            font-weight: 600;
            font-size: {tokens.FONT_SIZE_XL}px;
        }}
        QLabel#trackArtist {{
            color: {tokens.NEUTRAL_500};
            font-size: {tokens.FONT_SIZE_XS}px;
        }}
        QLabel#timeLabel {{
            color: {tokens.NEUTRAL_500};
            font-size: {tokens.FONT_SIZE_MINI}px;
            font-family: monospace;
        }}
        """
