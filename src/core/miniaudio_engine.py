"""
miniaudio Audio Engine Implementation

Decodes the whole in-memory buffer with miniaudio into float32 frames and
streams them to a miniaudio playback device through a generator.
Position is tracked in frames by the generator itself, so reaching the end
of the buffer shows up as position == duration.
"""

import array
import logging
import threading
from typing import Any, Generator, Optional

from core.audio_engine import AudioEngineBase, DecodeError, PlayerState

logger = logging.getLogger(__name__)

# Try importing miniaudio (for probe method)
try:
    import miniaudio
    MINIAUDIO_AVAILABLE = True
except ImportError:
    MINIAUDIO_AVAILABLE = False
    logger.warning("miniaudio library not installed, MiniaudioEngine unavailable")

DEFAULT_CHANNELS = 2
DEFAULT_CHUNK_FRAMES = 1024


class MiniaudioEngine(AudioEngineBase):
    """
    Audio engine based on miniaudio

    The playback device is opened lazily on the first play() and matched to
    the sample rate of the decoded audio.
    """

    @staticmethod
    def probe() -> bool:
        """Detect if miniaudio dependency is available"""
        return MINIAUDIO_AVAILABLE

    def __init__(self):
        if not MINIAUDIO_AVAILABLE:
            raise ImportError("miniaudio library not installed")

        super().__init__()

        self._device: Optional[Any] = None
        self._device_sample_rate: int = 0
        self._decoded: Optional[Any] = None
        self._sample_rate: int = 44100
        self._channels: int = DEFAULT_CHANNELS
        self._total_frames: int = 0
        self._position_frames: int = 0

        # The device callback runs on miniaudio's own thread
        self._lock = threading.Lock()

    # ===== Decoding =====

    def load(self, data: bytes, name_hint: str = "") -> None:
        """Decode an in-memory audio buffer"""
        if self._state == PlayerState.PLAYING:
            self.stop()

        try:
            decoded = miniaudio.decode(
                data,
                output_format=miniaudio.SampleFormat.FLOAT32,
                nchannels=DEFAULT_CHANNELS,
            )
        except miniaudio.DecodeError as e:
            self._state = PlayerState.ERROR
            raise DecodeError(str(e), name_hint) from e

        if decoded.sample_rate <= 0 or not decoded.samples:
            self._state = PlayerState.ERROR
            raise DecodeError("empty audio stream", name_hint)

        with self._lock:
            self._decoded = decoded
            self._sample_rate = decoded.sample_rate
            self._channels = decoded.nchannels
            self._total_frames = len(decoded.samples) // self._channels
            self._duration = self._total_frames / self._sample_rate
            self._position_frames = 0
            self._state = PlayerState.STOPPED

        logger.debug(
            "Decoded %s: %.2fs, %d Hz, %d channels",
            name_hint or "buffer", self._duration, self._sample_rate, self._channels,
        )

    # ===== Device Management =====

    def _ensure_device(self) -> Any:
        """Open (or reopen at a new sample rate) the playback device"""
        if self._device is not None and self._device_sample_rate == self._sample_rate:
            return self._device

        self._close_device()
        self._device = miniaudio.PlaybackDevice(
            output_format=miniaudio.SampleFormat.FLOAT32,
            nchannels=self._channels,
            sample_rate=self._sample_rate,
        )
        self._device_sample_rate = self._sample_rate
        logger.info("miniaudio device opened, sample rate: %d", self._sample_rate)
        return self._device

    def _close_device(self) -> None:
        if self._device is None:
            return
        try:
            self._device.close()
        except Exception as e:
            logger.warning("Failed to close audio device: %s", e)
        self._device = None
        self._device_sample_rate = 0

    # ===== Stream Processing =====

    def _create_stream(self) -> Generator[array.array, int, None]:
        """Create a primed generator that yields frames from the current position"""
        samples = self._decoded.samples
        channels = self._channels
        total_samples = len(samples)

        def stream_generator():
            framecount = yield
            while True:
                with self._lock:
                    start = self._position_frames * channels
                    if start >= total_samples:
                        self._position_frames = self._total_frames
                        return
                    requested = framecount or DEFAULT_CHUNK_FRAMES
                    end = min(start + requested * channels, total_samples)
                    chunk = samples[start:end]
                    self._position_frames += len(chunk) // channels
                framecount = yield chunk

        generator = stream_generator()
        next(generator)
        return generator

    # ===== Playback Control =====

    def play(self) -> None:
        """Start or resume playback from the current position"""
        if self._decoded is None or self._state == PlayerState.PLAYING:
            return
        device = self._ensure_device()
        device.start(self._create_stream())
        self._state = PlayerState.PLAYING

    def pause(self) -> None:
        """Pause playback"""
        if self._state == PlayerState.PLAYING and self._device is not None:
            self._device.stop()
            self._state = PlayerState.PAUSED

    def stop(self) -> None:
        """Stop playback and rewind"""
        if self._device is not None:
            self._device.stop()
        with self._lock:
            self._position_frames = 0
        if self.is_loaded:
            self._state = PlayerState.STOPPED

    def set_position(self, seconds: float) -> None:
        """Seek to a specified position"""
        if self._decoded is None:
            return
        frames = int(seconds * self._sample_rate)
        with self._lock:
            self._position_frames = max(0, min(self._total_frames, frames))

        if self._state == PlayerState.PLAYING:
            # Restart the stream so the device picks up the new position
            self._device.stop()
            self._device.start(self._create_stream())

    def get_position(self) -> float:
        """Get current playback position (seconds)"""
        if self._sample_rate <= 0:
            return 0.0
        with self._lock:
            return self._position_frames / self._sample_rate

    def cleanup(self) -> None:
        """Clean up resources"""
        if self._device is not None:
            try:
                self._device.stop()
            except Exception as e:
                logger.debug("miniaudio stop during cleanup failed: %s", e)
        self._close_device()
        self._decoded = None
        self._state = PlayerState.IDLE

    def get_engine_name(self) -> str:
        return "miniaudio"
