"""
Playback Session Module

Single source of truth for the playlist, the cursor and the play state.
"""

from typing import Callable, List, Optional, Sequence, Tuple
import logging

from core.audio_engine import AudioEngineBase, AudioEngineError, DecodeError, EngineUnavailableError
from core.event_bus import EventBus, EventType
from core.progress_ticker import ProgressTicker
from models.playback import PlaybackState, ProgressSnapshot
from models.track import Track
from services.file_picker import FileHandle, TrackImportError

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], AudioEngineBase]
TickerFactory = Callable[[Callable[[], None]], ProgressTicker]


class PlaybackSession:
    """
    Playback Session

    Owns the ordered playlist, the current track index and the logical play state,
    and mediates every control action. Audio rendering is delegated to an engine;
    a fresh engine is created for every track load and the previous one is
    released.

    All methods are expected to run on one thread (the UI thread); ticks arrive
    through the ProgressTicker on that same thread.

    Example:
        session = PlaybackSession(
            engine_factory=AudioEngineFactory.factory_for("miniaudio"),
            ticker_factory=lambda cb: QtProgressTicker(cb, 500),
        )
        session.import_tracks(picker.pick_audio_files())  # starts playing if it was empty
        session.next_track()
        session.seek(30.0)
    """

    def __init__(
        self,
        engine_factory: EngineFactory,
        ticker_factory: TickerFactory,
        event_bus: Optional[EventBus] = None,
    ):
        self._engine_factory = engine_factory
        self._ticker = ticker_factory(self.on_tick)
        self._event_bus = event_bus or EventBus()

        self._playlist: List[Track] = []
        self._cursor: int = -1
        self._state: PlaybackState = PlaybackState.EMPTY
        self._engine: Optional[AudioEngineBase] = None
        self._progress = ProgressSnapshot()

    # ===== Read-only state =====

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def cursor(self) -> int:
        """Index of the loaded track, -1 before anything was loaded"""
        return self._cursor

    @property
    def playlist(self) -> Tuple[Track, ...]:
        return tuple(self._playlist)

    @property
    def progress(self) -> ProgressSnapshot:
        return self._progress

    @property
    def current_track(self) -> Optional[Track]:
        if 0 <= self._cursor < len(self._playlist):
            return self._playlist[self._cursor]
        return None

    @property
    def is_playing(self) -> bool:
        return self._state == PlaybackState.PLAYING

    @property
    def is_empty(self) -> bool:
        """Whether the playlist has no tracks"""
        return not self._playlist

    @property
    def ticker(self) -> ProgressTicker:
        return self._ticker

    # ===== Import =====

    def import_tracks(self, handles: Sequence[FileHandle]) -> List[Track]:
        """
        Read and append tracks

        All handles are read before anything is appended; one unreadable file
        abandons the whole call. If the playlist was empty, the first imported
        track is loaded and played.

        Args:
            handles: Files chosen by the user (empty when the picker was cancelled)

        Returns:
            List[Track]: The appended tracks

        Raises:
            ImportPermissionError: If any handle cannot be read
            DecodeError: If the first track of a previously empty playlist cannot be decoded
            EngineUnavailableError: If no audio engine can be built for that track
        """
        if not handles:
            return []

        tracks = []
        for handle in handles:
            try:
                data = handle.read_bytes()
            except TrackImportError as e:
                logger.error("Import aborted, %d file(s) discarded: %s", len(handles), e)
                self._publish_error(e)
                raise
            tracks.append(Track(raw_audio_bytes=data, display_name=handle.display_name))

        was_empty = self.is_empty
        self._playlist.extend(tracks)
        logger.info(
            "Imported %d track(s) (%d bytes), playlist size %d",
            len(tracks), sum(t.size_bytes for t in tracks), len(self._playlist),
        )
        self._event_bus.publish_sync(EventType.PLAYLIST_CHANGED, self.playlist)

        if was_empty:
            self.load_track(0)
            self.play()
        return tracks

    # ===== Loading =====

    def load_track(self, index: int) -> None:
        """
        Load the track at `index` into a fresh engine, paused at 0

        The new engine is built before the previous one is released, so
        backends sharing a global mixer keep it open across track changes.

        Raises:
            IndexError: If index is out of range
            EngineUnavailableError: If no engine can be built
            DecodeError: If the engine rejects the bytes
            On either error the session is left EMPTY with the cursor on the
            failed slot.
        """
        if not 0 <= index < len(self._playlist):
            raise IndexError(f"track index {index} out of range (playlist size {len(self._playlist)})")

        self._ticker.stop()
        track = self._playlist[index]
        self._cursor = index

        try:
            engine = self._engine_factory()
        except Exception as e:
            self._release_engine()
            self._enter_empty()
            logger.error("No audio engine for %s: %s", track.display_name, e)
            if isinstance(e, AudioEngineError):
                self._publish_error(e)
                raise
            error = EngineUnavailableError(str(e))
            self._publish_error(error)
            raise error from e

        self._release_engine()
        try:
            engine.load(track.raw_audio_bytes, track.extension)
        except DecodeError as e:
            engine.cleanup()
            self._enter_empty()
            logger.error("Failed to load %s: %s", track.display_name, e)
            self._publish_error(e)
            raise

        self._engine = engine
        self._progress = ProgressSnapshot(0.0, engine.get_duration())
        self._state = PlaybackState.PAUSED
        logger.debug("Loaded [%d] %s (%s)", index, track.display_name, self._progress.duration_str)
        self._event_bus.publish_sync(EventType.TRACK_LOADED, track)

    def _enter_empty(self) -> None:
        self._state = PlaybackState.EMPTY
        self._progress = ProgressSnapshot()

    def _release_engine(self) -> None:
        if self._engine is None:
            return
        engine = self._engine
        self._engine = None
        engine.stop()
        engine.cleanup()

    # ===== Transport =====

    def play(self) -> None:
        """Start playback of the loaded track; no-op if empty or already playing"""
        if self.is_empty or self._engine is None or self._state == PlaybackState.PLAYING:
            return
        self._engine.play()
        self._state = PlaybackState.PLAYING
        self._ticker.start()
        self._event_bus.publish_sync(EventType.TRACK_STARTED, self.current_track)

    def pause(self) -> None:
        """Pause playback; no-op if not playing"""
        if self._state != PlaybackState.PLAYING or self._engine is None:
            return
        self._engine.pause()
        self._state = PlaybackState.PAUSED
        self._ticker.stop()
        self._event_bus.publish_sync(EventType.TRACK_PAUSED, self.current_track)

    def toggle_play_pause(self) -> None:
        """Toggle play/pause"""
        if self._state == PlaybackState.PLAYING:
            self.pause()
        else:
            self.play()

    def next_track(self) -> None:
        """Advance circularly and play (skipping always resumes playback)"""
        if self.is_empty:
            return
        self._skip_to((self._cursor + 1) % len(self._playlist))

    def previous_track(self) -> None:
        """Go back circularly and play"""
        if self.is_empty:
            return
        self._skip_to((self._cursor - 1 + len(self._playlist)) % len(self._playlist))

    def _skip_to(self, index: int) -> None:
        self.load_track(index)
        self.play()

    def seek(self, seconds: float) -> None:
        """
        Seek within the loaded track

        The target is clamped to [0, duration]; the play state is unchanged.
        """
        if self._engine is None:
            return
        duration = self._engine.get_duration()
        target = max(0.0, min(float(seconds), duration))
        self._engine.set_position(target)
        self._progress = ProgressSnapshot(target, duration)
        self._event_bus.publish_sync(EventType.POSITION_CHANGED, self._progress)

    # ===== Ticks =====

    def on_tick(self) -> None:
        """
        Sample the engine position; advance when the track has run out

        Natural completion is only ever detected here, by position >= duration.
        """
        if self._state != PlaybackState.PLAYING or self._engine is None:
            return

        self._progress = ProgressSnapshot(
            max(0.0, self._engine.get_position()),
            self._engine.get_duration(),
        )
        self._event_bus.publish_sync(EventType.POSITION_CHANGED, self._progress)

        if self._progress.is_complete:
            logger.info("Finished %s", self.current_track.display_name)
            try:
                self.next_track()
            except AudioEngineError:
                # Already reported through ERROR_OCCURRED; stay stopped on the failed slot
                logger.warning("Auto-advance stopped at track %d", self._cursor)

    # ===== Helpers =====

    def _publish_error(self, error: Exception) -> None:
        self._event_bus.publish_sync(EventType.ERROR_OCCURRED, {
            "source": "PlaybackSession",
            "error": str(error),
            "exception": error,
        })

    def cleanup(self) -> None:
        """Clean up resources"""
        self._ticker.stop()
        self._release_engine()
        self._state = PlaybackState.EMPTY
