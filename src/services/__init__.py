"""
Service Layer Module
"""

from .config_service import ConfigService
from .file_picker import (
    FileHandle,
    LocalFileHandle,
    FilePickerService,
    QtFilePickerService,
    TrackImportError,
    ImportPermissionError,
)
from .playback_session import PlaybackSession
