from __future__ import annotations

import itertools
import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class TickSource(ABC):
    """Host hook that calls back once on the next display refresh."""

    @abstractmethod
    def request(self, callback: TickCallback) -> int: ...

    @abstractmethod
    def cancel(self, handle: int) -> None: ...


class ManualTickSource(TickSource):
    """Queues callbacks until the host calls :meth:`step`."""

    def __init__(self) -> None:
        self._pending: dict[int, TickCallback] = {}
        self._handles = itertools.count(1)

    def request(self, callback: TickCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def step(self) -> int:
        """Run the callbacks queued before this call. Returns how many ran."""
        batch = list(self._pending.items())
        self._pending.clear()
        for _, callback in batch:
            callback()
        return len(batch)


class BlockingTickSource(ManualTickSource):
    """Drives queued callbacks from a sleep loop at a fixed refresh rate."""

    def __init__(self, refresh_hz: float = 60.0, sleep: Callable[[float], None] = time.sleep):
        if refresh_hz <= 0:
            raise ValueError("refresh_hz must be positive")
        super().__init__()
        self.refresh_hz = refresh_hz
        self._sleep = sleep

    def run(self, max_steps: Optional[int] = None) -> int:
        """Loop until nothing is pending (or max_steps refreshes ran)."""
        steps = 0
        period = 1.0 / self.refresh_hz
        while self.pending and (max_steps is None or steps < max_steps):
            self._sleep(period)
            self.step()
            steps += 1
        logger.debug("Tick loop finished after %d refreshes", steps)
        return steps
