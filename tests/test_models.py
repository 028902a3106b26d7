"""
Model Tests
"""

import math

import pytest

from models.playback import PlaybackState, ProgressSnapshot, format_time
from models.track import Track


class TestFormatTime:
    @pytest.mark.parametrize("seconds, expected", [
        (0, "00:00"),
        (5, "00:05"),
        (65, "01:05"),
        (599.9, "09:59"),
        (3599, "59:59"),
        (3600, "60:00"),
    ])
    def test_values(self, seconds, expected):
        assert format_time(seconds) == expected

    @pytest.mark.parametrize("seconds", [None, -1, -0.5, math.nan])
    def test_invalid_is_zero(self, seconds):
        assert format_time(seconds) == "00:00"


class TestProgressSnapshot:
    def test_default(self):
        snapshot = ProgressSnapshot()
        assert not snapshot.is_complete
        assert snapshot.current_str == "00:00"

    def test_complete_at_or_past_duration(self):
        assert ProgressSnapshot(100, 100).is_complete
        assert ProgressSnapshot(100.4, 100).is_complete
        assert not ProgressSnapshot(99.9, 100).is_complete

    def test_unknown_duration_never_complete(self):
        assert not ProgressSnapshot(10, 0).is_complete

    def test_strings(self):
        snapshot = ProgressSnapshot(65, 3599)
        assert snapshot.current_str == "01:05"
        assert snapshot.duration_str == "59:59"


class TestTrack:
    def test_extension_and_size(self):
        track = Track(b"12345", "Song.Name.MP3")
        assert track.extension == "mp3"
        assert track.size_bytes == 5

    def test_no_extension(self):
        assert Track(b"", "noext").extension == ""

    def test_repr_hides_bytes(self):
        assert "raw_audio_bytes" not in repr(Track(b"x" * 100, "a.mp3"))

    def test_frozen(self):
        track = Track(b"x", "a.mp3")
        with pytest.raises(AttributeError):
            track.display_name = "b.mp3"

    def test_duplicates_compare_equal(self):
        assert Track(b"x", "a.mp3") == Track(b"x", "a.mp3")


def test_playback_states():
    assert {s.value for s in PlaybackState} == {"empty", "paused", "playing"}
