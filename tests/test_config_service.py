"""
ConfigService tests: defaults, dot-key access and path isolation.

The user directories are sandboxed so tests never touch real user files.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import yaml


@pytest.fixture(autouse=True)
def _reset_config_service():
    from services.config_service import ConfigService

    ConfigService.reset_instance()
    yield
    ConfigService.reset_instance()


def _sandbox_user_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    base = tmp_path / "user-config"
    # Set for every platform so nothing leaks to the real user directories
    monkeypatch.setenv("APPDATA", str(base))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(base))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "user-data"))
    return base


class TestConfigService:
    """Configuration Service Tests"""

    def test_singleton(self, tmp_path):
        from services.config_service import ConfigService

        config1 = ConfigService(str(tmp_path / "config.yaml"))
        config2 = ConfigService(str(tmp_path / "config.yaml"))
        assert config1 is config2

    def test_defaults(self, tmp_path):
        """Built-in defaults are available without any file."""
        from services.config_service import ConfigService

        config = ConfigService(str(tmp_path / "missing.yaml"))

        assert config.get("playback.tick_interval_ms") == 500
        assert config.get("audio.backend") == "miniaudio"
        assert config.get("ui.artist_placeholder") == "Unknown Artist"
        assert "mp3" in config.get("library.supported_formats")
        assert config.get("shortcuts.play_pause") == "Space"

    def test_missing_key_returns_default(self, tmp_path):
        from services.config_service import ConfigService

        config = ConfigService(str(tmp_path / "config.yaml"))

        assert config.get("no.such.key", 7) == 7
        assert config.get("playback.tick_interval_ms.deeper", "x") == "x"

    def test_set_and_get(self, tmp_path):
        from services.config_service import ConfigService

        config = ConfigService(str(tmp_path / "config.yaml"))
        config.set("test.nested.value", 123)

        assert config.get("test.nested.value") == 123

    def test_get_all_is_a_copy(self, tmp_path):
        from services.config_service import ConfigService

        config = ConfigService(str(tmp_path / "config.yaml"))
        snapshot = config.get_all()
        snapshot["audio"]["backend"] = "changed"

        assert config.get("audio.backend") == "miniaudio"

    def test_reset(self, tmp_path):
        from services.config_service import ConfigService

        config = ConfigService(str(tmp_path / "config.yaml"))
        config.set("audio.backend", "pygame")
        config.reset()

        assert config.get("audio.backend") == "miniaudio"


def test_custom_path_overrides_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from services.config_service import ConfigService

    _sandbox_user_dirs(monkeypatch, tmp_path)
    custom_path = tmp_path / "custom.yaml"
    custom_path.write_text(
        yaml.safe_dump({"playback": {"tick_interval_ms": 250}}), encoding="utf-8"
    )

    config = ConfigService(str(custom_path))

    assert config.get("playback.tick_interval_ms") == 250
    # Keys absent from the file still come from the defaults
    assert config.get("audio.backend") == "miniaudio"


def test_custom_path_save_and_reload_round_trip(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from services.config_service import ConfigService

    _sandbox_user_dirs(monkeypatch, tmp_path)

    custom_path = tmp_path / "isolated.yaml"
    config = ConfigService(str(custom_path))
    config.set("audio.backend", "pygame")

    assert config.save() is True
    assert custom_path.exists()

    # Custom mode should not write to the default user directory
    assert (ConfigService.get_user_config_dir() / "config.yaml").exists() is False

    ConfigService.reset_instance()
    config2 = ConfigService(str(custom_path))
    assert config2.get("audio.backend") == "pygame"


@pytest.mark.skipif(sys.platform == "darwin", reason="macOS ignores XDG_CONFIG_HOME")
def test_default_mode_user_config_overrides_template(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from services.config_service import ConfigService

    base = _sandbox_user_dirs(monkeypatch, tmp_path)
    monkeypatch.chdir(tmp_path)

    template = tmp_path / "config" / "default_config.yaml"
    template.parent.mkdir()
    template.write_text(
        yaml.safe_dump({"ui": {"window_width": 500, "window_height": 600}}), encoding="utf-8"
    )

    user_file = base / "sprite-player" / "config.yaml"
    user_file.parent.mkdir(parents=True)
    user_file.write_text(yaml.safe_dump({"ui": {"window_width": 640}}), encoding="utf-8")

    config = ConfigService()

    assert config.user_config_path == user_file
    assert config.get("ui.window_width") == 640
    assert config.get("ui.window_height") == 600


def test_passing_template_path_does_not_write_to_template(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from services.config_service import ConfigService

    _sandbox_user_dirs(monkeypatch, tmp_path)
    monkeypatch.chdir(tmp_path)

    template = tmp_path / "config" / "default_config.yaml"
    template.parent.mkdir()
    template.write_text(yaml.safe_dump({"ui": {"window_width": 500}}), encoding="utf-8")
    before = template.read_text(encoding="utf-8")

    config = ConfigService("config/default_config.yaml")
    config.set("ui.window_width", 999)
    assert config.save() is True

    assert template.read_text(encoding="utf-8") == before
    assert config.user_config_path.exists()


def test_invalid_yaml_falls_back_to_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from services.config_service import ConfigService

    _sandbox_user_dirs(monkeypatch, tmp_path)
    broken = tmp_path / "broken.yaml"
    broken.write_text("playback: [unclosed", encoding="utf-8")

    config = ConfigService(str(broken))

    assert config.get("playback.tick_interval_ms") == 500


def test_non_mapping_yaml_is_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from services.config_service import ConfigService

    _sandbox_user_dirs(monkeypatch, tmp_path)
    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n", encoding="utf-8")

    config = ConfigService(str(listing))

    assert config.get("audio.backend") == "miniaudio"


@pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="XDG layout is Linux only")
def test_user_data_dir_follows_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from services.config_service import ConfigService

    _sandbox_user_dirs(monkeypatch, tmp_path)

    assert ConfigService.get_user_data_dir() == tmp_path / "user-data" / "sprite-player"
