"""
Sprite Player - Main Entry Point

Usage:
    sprite-player [FILE ...]

Audio files given on the command line are imported as if picked in the
import dialog.
"""

import sys
import os

# Add src to path
src_path = os.path.dirname(os.path.abspath(__file__))
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from PyQt6.QtWidgets import QApplication
from PyQt6.QtCore import Qt


def _file_arguments(arguments):
    """Positional arguments, with Qt's own -options left out"""
    return [arg for arg in arguments[1:] if not arg.startswith("-")]


def main():
    """Application entry point"""
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )
    app = QApplication(sys.argv)

    from app.container_factory import AppContainerFactory
    from app.logging_setup import setup_logging
    from services.config_service import ConfigService
    from services.file_picker import handles_from_paths

    config = ConfigService()
    setup_logging(config.get("app.log_level", "INFO"), log_dir=ConfigService.get_user_data_dir())

    app.setApplicationName(config.get("app.name", "Sprite Player"))
    app.setApplicationVersion(config.get("app.version", "1.0.0"))

    # Composition root
    container = AppContainerFactory.create(use_qt_timer=True)

    # Lazy import, the window pulls in every widget module
    from ui.main_window import MainWindow

    window = MainWindow(container)
    window.show()

    paths = _file_arguments(app.arguments())
    if paths:
        window.import_handles(handles_from_paths(paths))

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
