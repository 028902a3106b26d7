"""
Track data model
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Track:
    """
    Track data model

    One imported audio file: the raw encoded bytes plus the label shown in the UI.
    The bytes are handed to the audio engine as-is on every load.
    """

    raw_audio_bytes: bytes = field(repr=False)
    display_name: str = ""

    @property
    def size_bytes(self) -> int:
        """Size of the encoded audio"""
        return len(self.raw_audio_bytes)

    @property
    def extension(self) -> str:
        """Lower-case file extension taken from the display name (without dot)"""
        return Path(self.display_name).suffix.lower().lstrip(".")

