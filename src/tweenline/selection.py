from __future__ import annotations

import logging
from typing import Optional

from .events import EventBus, names
from .refs import FrameRef

logger = logging.getLogger(__name__)


class SelectionModel:
    """Set of selected ``"<layerId>:<frame>"`` cells plus the last one picked.

    References are not checked against the document; a selection may name
    frames that hold no keyframe.
    """

    def __init__(self, events: EventBus):
        self._events = events
        self._selected: dict[str, None] = {}
        self._last: Optional[str] = None

    def select_frame(self, ref: str) -> None:
        self.clear_selection()
        self._selected[ref] = None
        self._last = ref
        self._emit()

    def deselect_frame(self, ref: str) -> None:
        self._selected.pop(ref, None)
        if self._last == ref:
            self._last = None
        self._emit()

    def toggle_selection(self, ref: str) -> None:
        if ref in self._selected:
            self.deselect_frame(ref)
            return
        self._selected[ref] = None
        self._last = ref
        self._emit()

    def select_range(self, start_ref: str, end_ref: str) -> bool:
        try:
            start = FrameRef.parse(start_ref)
            end = FrameRef.parse(end_ref)
        except ValueError as e:
            logger.warning("%s", e)
            return False

        if start.layer_id != end.layer_id:
            logger.warning("Range selection only works on the same layer")
            return False

        self.clear_selection()
        lo, hi = sorted((start.frame, end.frame))
        for frame in range(lo, hi + 1):
            self._selected[str(FrameRef(start.layer_id, frame))] = None
        self._last = end_ref
        self._emit()
        return True

    def clear_selection(self) -> None:
        self._selected.clear()
        self._last = None
        self._emit()

    def is_selected(self, ref: str) -> bool:
        return ref in self._selected

    def get_selected_frames(self) -> list[str]:
        return list(self._selected)

    def get_selection_count(self) -> int:
        return len(self._selected)

    def get_last_selected_frame(self) -> Optional[str]:
        return self._last

    def _emit(self) -> None:
        frames = self.get_selected_frames()
        selected_ids = []
        for ref in frames:
            try:
                selected_ids.append(FrameRef.parse(ref).event_id)
            except ValueError:
                continue
        self._events.emit(names.KEYFRAME_SELECT, {"selectedIds": selected_ids})
        self._events.emit(names.SELECTION_CHANGED, {"selectedFrames": frames, "count": len(frames)})
