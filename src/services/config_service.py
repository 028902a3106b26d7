"""
Configuration Service Module

Layered YAML settings: built-in defaults, then the repository template
(config/default_config.yaml), then the user's own config.yaml. Only the
user layer is ever written back.
"""

from typing import Any, Dict, Iterable, Optional
from pathlib import Path
import copy
import os
import sys
import yaml
import threading
import logging

logger = logging.getLogger(__name__)

APP_DIR_NAME = "sprite-player"
DEFAULT_CONFIG_PATH = "config/default_config.yaml"

DEFAULTS: Dict[str, Any] = {
    'app': {
        'name': 'Sprite Player',
        'version': '1.0.0',
        'log_level': 'INFO',
    },
    'audio': {
        'backend': 'miniaudio',
    },
    'playback': {
        'tick_interval_ms': 500,
    },
    'library': {
        'supported_formats': ['mp3', 'wav', 'flac', 'ogg'],
    },
    'ui': {
        'window_width': 420,
        'window_height': 560,
        'artist_placeholder': 'Unknown Artist',
        'sprite_frame_interval_ms': 120,
    },
    'shortcuts': {
        'import': 'Ctrl+O',
        'play_pause': 'Space',
        'next_track': 'Ctrl+Right',
        'previous_track': 'Ctrl+Left',
    },
}


def _merge_into(target: Dict[str, Any], overlay: Dict[str, Any]) -> None:
    """Recursively copy `overlay` onto `target`; nested mappings are merged"""
    for key, value in overlay.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge_into(current, value)
        else:
            target[key] = value


class ConfigService:
    """
    Configuration Service (singleton)

    Passing a path other than the template makes that file the single user
    layer (tests, portable setups); the template is then skipped.

    Example:
        config = ConfigService()
        interval = config.get("playback.tick_interval_ms", 500)
        config.set("audio.backend", "pygame")
        config.save()
    """

    _instance: Optional['ConfigService'] = None
    _lock = threading.Lock()

    def __new__(cls, config_path: str = None) -> 'ConfigService':
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: str = None):
        if self._initialized:
            return

        self._template_path = Path(DEFAULT_CONFIG_PATH)
        requested = Path(config_path) if config_path else None
        self._custom = requested is not None and requested != self._template_path
        self._user_config_path = (
            requested if self._custom else self.get_user_config_dir() / "config.yaml"
        )

        self._values: Dict[str, Any] = {}
        self._values_lock = threading.Lock()
        self._initialized = True

        self._load()

    # ===== Locations =====

    @staticmethod
    def get_user_config_dir() -> Path:
        """Per-user config directory (APPDATA, Application Support or XDG_CONFIG_HOME)"""
        if sys.platform == "win32":
            base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        elif sys.platform == "darwin":
            base = Path.home() / "Library" / "Application Support"
        else:
            base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
        return base / APP_DIR_NAME

    @staticmethod
    def get_user_data_dir() -> Path:
        """Per-user data directory; holds the log files"""
        if sys.platform in ("win32", "darwin"):
            return ConfigService.get_user_config_dir()
        base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
        return base / APP_DIR_NAME

    @property
    def user_config_path(self) -> Path:
        return self._user_config_path

    # ===== Loading =====

    def _layers(self) -> Iterable[Path]:
        if not self._custom:
            yield self._template_path
        yield self._user_config_path

    def _load(self) -> None:
        values = copy.deepcopy(DEFAULTS)
        for path in self._layers():
            _merge_into(values, self._read_yaml(path))

        with self._values_lock:
            self._values = values

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        """Mapping stored in `path`; empty if missing, unreadable or not a mapping"""
        if not path.exists():
            return {}
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring configuration %s: %s", path, e)
            return {}
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring configuration %s: top level is not a mapping", path)
            return {}
        return data

    # ===== Access =====

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a dot-separated key, e.g. "ui.window_width"

        Returns `default` when any part of the path is missing.
        """
        with self._values_lock:
            node = self._values
            for part in key.split('.'):
                if not isinstance(node, dict) or part not in node:
                    return default
                node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Store a value under a dot-separated key, creating sections as needed"""
        *sections, leaf = key.split('.')
        with self._values_lock:
            node = self._values
            for part in sections:
                child = node.get(part)
                if not isinstance(child, dict):
                    child = node[part] = {}
                node = child
            node[leaf] = value

    def get_all(self) -> Dict[str, Any]:
        """Deep copy of the merged settings"""
        with self._values_lock:
            return copy.deepcopy(self._values)

    def save(self) -> bool:
        """
        Write the merged settings to the user file

        Returns:
            bool: False if the file could not be written
        """
        try:
            self._user_config_path.parent.mkdir(parents=True, exist_ok=True)
            with self._values_lock:
                snapshot = copy.deepcopy(self._values)
            with open(self._user_config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(snapshot, f, allow_unicode=True, default_flow_style=False)
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to save configuration to %s: %s", self._user_config_path, e)
            return False
        logger.debug("Configuration saved to %s", self._user_config_path)
        return True

    def reload(self) -> None:
        """Re-read every layer from disk"""
        self._load()

    def reset(self) -> None:
        """Drop every override and go back to the built-in defaults (not saved)"""
        with self._values_lock:
            self._values = copy.deepcopy(DEFAULTS)

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the singleton (tests only)"""
        with cls._lock:
            cls._instance = None
