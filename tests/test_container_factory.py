"""
Composition root tests: AppContainerFactory wiring and logging setup.
"""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml

from conftest import EngineRecorder


@pytest.fixture(autouse=True)
def _reset_singletons():
    from core.event_bus import EventBus
    from services.config_service import ConfigService

    ConfigService.reset_instance()
    EventBus.reset_instance()
    yield
    ConfigService.reset_instance()
    EventBus.reset_instance()


@pytest.fixture
def config_path(tmp_path: Path) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"playback": {"tick_interval_ms": 250}}), encoding="utf-8")
    return str(path)


class TestAppContainerFactory:
    def test_headless_container(self, config_path, make_handles):
        from app.container_factory import AppContainerFactory
        from core.progress_ticker import ManualProgressTicker

        engines = EngineRecorder()
        picker = MagicMock()
        container = AppContainerFactory.create(
            config_path=config_path,
            use_qt_timer=False,
            engine_factory=engines,
            file_picker=picker,
        )

        ticker = container.session.ticker
        assert isinstance(ticker, ManualProgressTicker)
        assert ticker.interval_ms == 250
        assert container.file_picker is picker

        container.session.import_tracks(make_handles("a.mp3"))
        assert container.session.is_playing
        assert len(engines.engines) == 1

        container.cleanup()
        assert engines.current.cleaned_up

    def test_session_publishes_on_container_bus(self, config_path, make_handles):
        from app.container_factory import AppContainerFactory
        from core.event_bus import EventType

        container = AppContainerFactory.create(
            config_path=config_path,
            use_qt_timer=False,
            engine_factory=EngineRecorder(),
            file_picker=MagicMock(),
        )
        started = []
        container.event_bus.subscribe(EventType.TRACK_STARTED, started.append)

        container.session.import_tracks(make_handles("a.mp3"))

        assert [t.display_name for t in started] == ["a.mp3"]
        container.cleanup()

    def test_default_picker_uses_configured_formats(self, tmp_path, qapp):
        from app.container_factory import AppContainerFactory
        from core.progress_ticker import QtProgressTicker
        from services.file_picker import QtFilePickerService

        path = tmp_path / "config.yaml"
        path.write_text(
            yaml.safe_dump({"library": {"supported_formats": ["flac", "ogg"]}}), encoding="utf-8"
        )

        container = AppContainerFactory.create(config_path=str(path), engine_factory=EngineRecorder())

        assert isinstance(container.file_picker, QtFilePickerService)
        assert container.file_picker.name_filter == "Audio Files (*.flac *.ogg)"
        assert isinstance(container.session.ticker, QtProgressTicker)
        container.cleanup()


class TestLoggingSetup:
    @pytest.fixture(autouse=True)
    def _restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_console_only(self):
        from app.logging_setup import setup_logging

        assert setup_logging("DEBUG") is None
        assert logging.getLogger().level == logging.DEBUG
        assert len(logging.getLogger().handlers) == 1

    def test_rotating_file(self, tmp_path):
        from logging.handlers import RotatingFileHandler
        from app.logging_setup import setup_logging

        log_file = setup_logging("info", log_dir=tmp_path / "logs")

        assert log_file == tmp_path / "logs" / "sprite-player.log"
        assert any(isinstance(h, RotatingFileHandler) for h in logging.getLogger().handlers)

        logging.getLogger("tests").info("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")

    def test_unknown_level_defaults_to_info(self):
        from app.logging_setup import setup_logging

        setup_logging("LOUD")
        assert logging.getLogger().level == logging.INFO

    def test_unwritable_directory_falls_back_to_console(self, tmp_path):
        from app.logging_setup import setup_logging

        blocker = tmp_path / "file"
        blocker.write_text("x")

        assert setup_logging("INFO", log_dir=blocker / "logs") is None
        assert len(logging.getLogger().handlers) == 1
