from __future__ import annotations

from .scheduler import PlaybackScheduler, monotonic_ms
from .ticks import BlockingTickSource, ManualTickSource, TickSource

__all__ = [
    "BlockingTickSource",
    "ManualTickSource",
    "PlaybackScheduler",
    "TickSource",
    "monotonic_ms",
]
