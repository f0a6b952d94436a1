from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from .config import TimelineConfig
from .document import TimelineDocument
from .events import EventBus
from .io import load_document, save_document
from .keyframes import KeyframeSequencer
from .layers import LayerTreeService
from .playback import PlaybackScheduler, TickSource
from .schema import TimelineData
from .selection import SelectionModel
from .store import Clipboard, StateStore
from .tweens import TweenEngine


class TimelineEditor:
    """One editing session: a document plus every service bound to it."""

    def __init__(
        self,
        data: Union[TimelineData, Mapping[str, Any], None] = None,
        config: Optional[TimelineConfig] = None,
        tick_source: Optional[TickSource] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.config = config or TimelineConfig()
        if data is None:
            data = TimelineData(settings=self.config.defaults.to_settings())

        self.events = EventBus()
        self.store = StateStore(self.events)
        self.clipboard = Clipboard(self.store)
        self.document = TimelineDocument(data)

        self.layers = LayerTreeService(self.document, self.events)
        self.keyframes = KeyframeSequencer(self.document, self.events, self.clipboard)
        self.tweens = TweenEngine(self.document, self.events)
        self.selection = SelectionModel(self.events)
        self.playback = PlaybackScheduler(self.document, self.events, tick_source=tick_source, clock=clock)

    @classmethod
    def open(cls, path: Path, **kwargs: Any) -> "TimelineEditor":
        doc = load_document(path)
        return cls(doc.data, **kwargs)

    def save(self, path: Path) -> Path:
        return save_document(self.document, path)
