"""
Audio Engine Module

An engine owns the decoded audio of exactly one track, taken from an
in-memory buffer, and renders it to the default output device. Positions
and durations are floats in seconds.

Backends: pygame (here) and miniaudio (core.miniaudio_engine).
"""

from abc import ABC, abstractmethod
from enum import Enum
import io
import threading
import logging

logger = logging.getLogger(__name__)


class PlayerState(Enum):
    """Engine state"""
    IDLE = "idle"           # Nothing decoded
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"     # Decoded, at rest
    ERROR = "error"         # Last load failed


class AudioEngineError(Exception):
    """Base class for failures reported by the audio layer"""


class EngineUnavailableError(AudioEngineError, RuntimeError):
    """No audio engine could be constructed (missing backend or output device)"""


class DecodeError(AudioEngineError):
    """Bytes handed to AudioEngineBase.load() are not playable audio"""

    def __init__(self, reason: str = "", name: str = ""):
        self.reason = reason
        self.name = name
        parts = ["Unable to decode audio"]
        if name:
            parts.append(name)
        if reason:
            parts.append(f"({reason})")
        super().__init__(" ".join(parts))


class AudioEngineBase(ABC):
    """
    Abstract audio engine

    Lifecycle: load() once, then any mix of play/pause/stop/set_position,
    then cleanup(). A new track means a new engine.
    """

    def __init__(self):
        self._state: PlayerState = PlayerState.IDLE
        self._duration: float = 0.0

    @staticmethod
    def probe() -> bool:
        """
        Whether the backend's libraries import

        Must not open devices or touch global audio state.
        """
        return False

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state not in (PlayerState.IDLE, PlayerState.ERROR)

    @abstractmethod
    def load(self, data: bytes, name_hint: str = "") -> None:
        """
        Decode `data`; the engine ends up STOPPED at position 0

        Args:
            data: Encoded audio (mp3, wav, flac, ogg, ...)
            name_hint: File extension, used by backends that need a format hint

        Raises:
            DecodeError: If the bytes cannot be decoded
        """

    @abstractmethod
    def play(self) -> None:
        """Start, or resume from the current position"""

    @abstractmethod
    def pause(self) -> None:
        """Halt output, keeping the position"""

    @abstractmethod
    def stop(self) -> None:
        """Halt output and rewind to 0"""

    @abstractmethod
    def set_position(self, seconds: float) -> None:
        """Move the play head; the playing/paused state is kept"""

    @abstractmethod
    def get_position(self) -> float:
        """Current play head in seconds"""

    def get_duration(self) -> float:
        """Length of the decoded audio in seconds (0 before load)"""
        return self._duration

    def cleanup(self) -> None:
        """Release device and decoder resources"""

    def get_engine_name(self) -> str:
        return "base"


class PygameAudioEngine(AudioEngineBase):
    """
    pygame.mixer.music engine

    pygame.mixer.music cannot report a duration, so mutagen reads it from the
    same buffer. The mixer is global to the process; engines share it through
    a reference count and the last one to clean up shuts it down.
    """

    _mixer_ready = False
    _mixer_users = 0
    _mixer_lock = threading.Lock()

    @staticmethod
    def probe() -> bool:
        try:
            import pygame
        except ImportError:
            return False
        return hasattr(pygame, 'mixer')

    def __init__(self):
        super().__init__()
        self._buffer = None
        # get_pos() counts from the last mixer play(); _start_offset is where that was
        self._start_offset: float = 0.0
        # Position to resume from while not playing
        self._resume_at: float = 0.0
        self._started = False
        self._released = False

        with PygameAudioEngine._mixer_lock:
            if not PygameAudioEngine._mixer_ready:
                import pygame
                pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=2048)
                PygameAudioEngine._mixer_ready = True
            PygameAudioEngine._mixer_users += 1

    def load(self, data: bytes, name_hint: str = "") -> None:
        import pygame

        if self._state == PlayerState.PLAYING:
            self.stop()

        duration = self._probe_duration(data)
        if duration <= 0:
            self._state = PlayerState.ERROR
            raise DecodeError("unrecognized audio data", name_hint)

        buffer = io.BytesIO(data)
        try:
            pygame.mixer.music.load(buffer, name_hint)
        except pygame.error as e:
            self._state = PlayerState.ERROR
            raise DecodeError(str(e), name_hint) from e

        self._buffer = buffer
        self._duration = duration
        self._start_offset = 0.0
        self._resume_at = 0.0
        self._started = False
        self._state = PlayerState.STOPPED

    @staticmethod
    def _probe_duration(data: bytes) -> float:
        from mutagen import File, MutagenError

        try:
            info = File(io.BytesIO(data))
        except MutagenError as e:
            logger.debug("mutagen rejected buffer: %s", e)
            return 0.0
        if info is None or info.info is None:
            return 0.0
        return float(info.info.length)

    def play(self) -> None:
        import pygame

        if self._state == PlayerState.PAUSED:
            pygame.mixer.music.unpause()
        elif self._state == PlayerState.STOPPED:
            pygame.mixer.music.play(start=self._resume_at)
            self._start_offset = self._resume_at
            self._started = True
        else:
            return
        self._state = PlayerState.PLAYING

    def pause(self) -> None:
        import pygame

        if self._state != PlayerState.PLAYING:
            return
        self._resume_at = self.get_position()
        pygame.mixer.music.pause()
        self._state = PlayerState.PAUSED

    def stop(self) -> None:
        import pygame

        pygame.mixer.music.stop()
        if self.is_loaded:
            self._state = PlayerState.STOPPED
        self._started = False
        self._start_offset = 0.0
        self._resume_at = 0.0

    def set_position(self, seconds: float) -> None:
        import pygame

        if self._state != PlayerState.PLAYING:
            self._resume_at = seconds
            if self._state == PlayerState.PAUSED:
                # unpause() would ignore the new position; restart from it on play()
                pygame.mixer.music.stop()
                self._state = PlayerState.STOPPED
            return

        try:
            pygame.mixer.music.play(start=seconds)
        except pygame.error as e:
            logger.warning("Seek to %.1fs failed: %s", seconds, e)
            return
        self._start_offset = seconds

    def get_position(self) -> float:
        """
        Current play head

        An idle mixer after a started playback means the track ran out, which
        is reported as the full duration.
        """
        import pygame

        if self._state != PlayerState.PLAYING:
            return self._resume_at if self.is_loaded else 0.0
        if self._started and not pygame.mixer.music.get_busy():
            return self._duration
        elapsed = max(0, pygame.mixer.music.get_pos()) / 1000.0
        return min(self._duration, self._start_offset + elapsed)

    def cleanup(self) -> None:
        import pygame

        with PygameAudioEngine._mixer_lock:
            if self._released:
                return
            self._released = True
            PygameAudioEngine._mixer_users = max(0, PygameAudioEngine._mixer_users - 1)
            last_user = PygameAudioEngine._mixer_ready and PygameAudioEngine._mixer_users == 0

        try:
            pygame.mixer.music.stop()
            pygame.mixer.music.unload()
        except pygame.error as e:
            logger.debug("Releasing pygame music failed: %s", e)

        self._buffer = None
        self._state = PlayerState.IDLE

        if last_user:
            try:
                pygame.mixer.quit()
            except pygame.error as e:
                logger.warning("pygame mixer shutdown failed: %s", e)
            finally:
                with PygameAudioEngine._mixer_lock:
                    PygameAudioEngine._mixer_ready = False

    def get_engine_name(self) -> str:
        return "pygame"
