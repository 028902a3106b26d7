"""
Data Models Module
"""

from .track import Track
from .playback import PlaybackState, ProgressSnapshot, format_time

__all__ = ['Track', 'PlaybackState', 'ProgressSnapshot', 'format_time']
