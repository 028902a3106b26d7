"""
File Picker Service Module

Selecting audio files and reading them with scoped access.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Sequence
import logging

logger = logging.getLogger(__name__)


class TrackImportError(Exception):
    """Base class for failures while importing tracks"""


class ImportPermissionError(TrackImportError):
    """
    A chosen file could not be accessed

    The whole import call that hit it is abandoned.
    """

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Cannot access {path}" + (f" ({reason})" if reason else "")
        )


class FileHandle(ABC):
    """
    Handle to one user-selected file

    Access is scoped: open_scoped() acquires it and releases it on every exit path.
    """

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Label shown for the track (the file name)"""
        pass

    @abstractmethod
    @contextmanager
    def open_scoped(self) -> Iterator[BinaryIO]:
        """
        Acquire access and yield a binary stream

        Raises:
            ImportPermissionError: If the file cannot be accessed
        """
        pass

    def read_bytes(self) -> bytes:
        """Read the full contents under scoped access"""
        with self.open_scoped() as stream:
            return stream.read()


class LocalFileHandle(FileHandle):
    """Handle to a file on the local file system"""

    def __init__(self, path: str):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def display_name(self) -> str:
        return self._path.name

    @contextmanager
    def open_scoped(self) -> Iterator[BinaryIO]:
        try:
            stream = open(self._path, "rb")
        except OSError as e:
            raise ImportPermissionError(str(self._path), e.strerror or str(e)) from e

        logger.debug("Acquired %s", self._path)
        try:
            yield stream
        except OSError as e:
            raise ImportPermissionError(str(self._path), e.strerror or str(e)) from e
        finally:
            stream.close()
            logger.debug("Released %s", self._path)

    def __repr__(self) -> str:
        return f"LocalFileHandle({str(self._path)!r})"


class FilePickerService(ABC):
    """Presents a selection of audio files and returns handles to them"""

    @abstractmethod
    def pick_audio_files(self) -> List[FileHandle]:
        """
        Ask the user for audio files

        Returns:
            List[FileHandle]: Selected files, empty when cancelled
        """
        pass


class QtFilePickerService(FilePickerService):
    """
    Native multi-select dialog restricted to audio files

    Example:
        picker = QtFilePickerService(["mp3", "wav"], parent=window)
        handles = picker.pick_audio_files()
    """

    def __init__(self, supported_formats: Sequence[str], parent=None):
        self._supported_formats = [fmt.lower().lstrip(".") for fmt in supported_formats]
        self._parent = parent
        self._last_directory: str = ""

    def set_parent(self, parent) -> None:
        """Attach the dialog to a window"""
        self._parent = parent

    @property
    def name_filter(self) -> str:
        """Filter string for QFileDialog, e.g. 'Audio Files (*.mp3 *.wav)'"""
        patterns = " ".join(f"*.{fmt}" for fmt in self._supported_formats)
        return f"Audio Files ({patterns})"

    def pick_audio_files(self) -> List[FileHandle]:
        from PyQt6.QtWidgets import QFileDialog

        paths, _ = QFileDialog.getOpenFileNames(
            self._parent,
            "Import Audio",
            self._last_directory,
            self.name_filter,
        )
        if not paths:
            logger.debug("File selection cancelled")
            return []

        self._last_directory = str(Path(paths[0]).parent)
        logger.info("Selected %d file(s)", len(paths))
        return [LocalFileHandle(path) for path in paths]


def handles_from_paths(paths: Optional[Sequence[str]]) -> List[FileHandle]:
    """Wrap plain paths (e.g. command-line arguments) as file handles"""
    return [LocalFileHandle(path) for path in (paths or [])]
