from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from ..document import TimelineDocument
from ..events import EventBus, names
from .ticks import ManualTickSource, TickSource

logger = logging.getLogger(__name__)

DEFAULT_FRAME_RATE = 24.0
DEFAULT_TOTAL_FRAMES = 100


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class PlaybackScheduler:
    """Moves the playhead through the timeline in real time.

    Each tick advances at most one frame. When the host falls behind, the
    excess elapsed time is carried into the next measurement instead of being
    caught up, so a slow host plays back slower rather than skipping frames.
    """

    def __init__(
        self,
        document: TimelineDocument,
        events: EventBus,
        tick_source: Optional[TickSource] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self._document = document
        self._events = events
        self._ticks = tick_source if tick_source is not None else ManualTickSource()
        self._clock = clock if clock is not None else monotonic_ms
        self._current_frame = 1
        self._is_playing = False
        self._handle: Optional[int] = None
        self._last_tick = 0.0
        self._frame_interval = self._compute_interval()

    @property
    def current_frame(self) -> int:
        return self._current_frame

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def frame_interval(self) -> float:
        """Milliseconds per frame at the document's frame rate."""
        return self._frame_interval

    def play(self) -> None:
        if self._is_playing:
            return
        self._is_playing = True
        self._last_tick = self._clock()
        self._frame_interval = self._compute_interval()

        self._events.emit(names.PLAYBACK_START, {"currentFrame": self._current_frame})
        self._events.emit(names.PLAYBACK_STARTED, {"frame": self._current_frame})
        logger.debug("Playback started at frame %d (%.2f ms/frame)", self._current_frame, self._frame_interval)
        self._tick()

    def pause(self) -> None:
        if not self._is_playing:
            return
        self._is_playing = False
        if self._handle is not None:
            self._ticks.cancel(self._handle)
            self._handle = None

        self._events.emit(names.PLAYBACK_PAUSE, {"currentFrame": self._current_frame})
        self._events.emit(names.PLAYBACK_PAUSED, {"frame": self._current_frame})

    def stop(self) -> None:
        self.pause()
        self.go_to_frame(1)
        self._events.emit(names.PLAYBACK_STOPPED, {"frame": self._current_frame})

    def go_to_frame(self, frame: int) -> None:
        self._current_frame = max(1, min(self._total_frames(), frame))
        self._events.emit(names.PLAYBACK_FRAME_CHANGED, {"frame": self._current_frame})

    def toggle_play_pause(self) -> None:
        if self._is_playing:
            self.pause()
        else:
            self.play()

    def _tick(self) -> None:
        self._handle = None
        if not self._is_playing:
            return

        now = self._clock()
        elapsed = now - self._last_tick
        if elapsed >= self._frame_interval:
            self._last_tick = now - (elapsed % self._frame_interval)
            self._advance()

        # a frame handler may have paused, or paused and restarted, playback
        if self._is_playing and self._handle is None:
            self._handle = self._ticks.request(self._tick)

    def _advance(self) -> None:
        self._current_frame += 1
        if self._current_frame > self._total_frames():
            self._current_frame = 1
            self._events.emit(names.PLAYBACK_LOOP, {"frame": self._current_frame})

        hits = self._document.keyframes_at_frame(self._current_frame)
        self._events.emit(
            names.FRAME_ENTER,
            {"currentFrame": self._current_frame, "keyframeIdsOnFrame": hits},
        )
        self._events.emit(names.PLAYBACK_FRAME_ENTER, {"frame": self._current_frame})

    def _settings(self):
        data = getattr(self._document, "data", None)
        return getattr(data, "settings", None)

    def _total_frames(self) -> int:
        settings = self._settings()
        return settings.total_frames if settings is not None else DEFAULT_TOTAL_FRAMES

    def _compute_interval(self) -> float:
        settings = self._settings()
        fps = settings.frame_rate if settings is not None else DEFAULT_FRAME_RATE
        return 1000.0 / fps
