"""
Playback state models
"""

from dataclasses import dataclass
from enum import Enum
import math


class PlaybackState(Enum):
    """Logical playback state of the session"""
    EMPTY = "empty"        # Nothing playable loaded
    PAUSED = "paused"      # Track loaded, not playing
    PLAYING = "playing"    # Track loaded and playing


def format_time(seconds: float) -> str:
    """Format seconds as zero-padded MM:SS (minutes are not wrapped into hours)."""
    if seconds is None or math.isnan(seconds) or seconds < 0:
        seconds = 0
    total_seconds = int(seconds)
    minutes = total_seconds // 60
    secs = total_seconds % 60
    return f"{minutes:02d}:{secs:02d}"


@dataclass(frozen=True)
class ProgressSnapshot:
    """Position/duration pair sampled from the audio engine"""
    current_seconds: float = 0.0
    duration_seconds: float = 0.0

    @property
    def is_complete(self) -> bool:
        """Whether the position has reached the end of a known duration"""
        return self.duration_seconds > 0 and self.current_seconds >= self.duration_seconds

    @property
    def current_str(self) -> str:
        """Formatted elapsed time (mm:ss)"""
        return format_time(self.current_seconds)

    @property
    def duration_str(self) -> str:
        """Formatted total time (mm:ss)"""
        return format_time(self.duration_seconds)
