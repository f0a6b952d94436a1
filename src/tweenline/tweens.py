from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .document import TimelineDocument
from .events import EventBus, names
from .schema import Layer, Tween

logger = logging.getLogger(__name__)

TweenLike = Union[Tween, Mapping[str, Any]]


def _as_tween(value: TweenLike) -> Tween:
    if isinstance(value, Tween):
        return value
    return Tween.model_validate(dict(value))


def _overlaps(a_start: int, a_end: int, b: Tween) -> bool:
    return a_start < b.end_frame and a_end > b.start_frame


class TweenEngine:
    """Interpolation ranges between keyframes on a layer.

    A tween covers the frames after its start keyframe up to and including its
    end keyframe; the start frame belongs to the keyframe, not the tween.
    """

    def __init__(self, document: TimelineDocument, events: EventBus):
        self._document = document
        self._events = events

    def create_motion_tween(
        self, layer_id: str, start_frame: int, end_frame: int, type: str = "linear"
    ) -> bool:
        layer = self._document.find_layer(layer_id)
        if layer is None:
            logger.error("Layer %s not found", layer_id)
            return False

        if layer.keyframe_at(start_frame) is None or layer.keyframe_at(end_frame) is None:
            logger.error("Both start and end must be keyframes")
            return False
        if start_frame >= end_frame:
            logger.error("Start frame must be before end frame")
            return False
        if any(_overlaps(start_frame, end_frame, tw) for tw in layer.tweens):
            logger.warning("Tween overlaps with existing tween")
            return False

        layer.tweens.append(Tween(start_frame=start_frame, end_frame=end_frame, type=type))
        layer.sort_tweens()

        self._events.emit(
            names.TWEEN_ADD,
            {"layerId": layer_id, "startFrame": start_frame, "endFrame": end_frame, "type": "motion"},
        )
        self._refresh("createMotionTween")
        return True

    def remove_tween(self, layer_id: str, start_frame: int, end_frame: int) -> bool:
        layer = self._document.find_layer(layer_id)
        if layer is None:
            logger.error("Layer or tweens not found")
            return False

        idx = self._index_of(layer, start_frame, end_frame)
        if idx is None:
            logger.warning("Tween not found")
            return False

        del layer.tweens[idx]
        self._events.emit(
            names.TWEEN_REMOVE,
            {"layerId": layer_id, "startFrame": start_frame, "endFrame": end_frame},
        )
        self._refresh("removeTween")
        return True

    def update_tween(self, layer_id: str, old_tween: TweenLike, new_tween: TweenLike) -> bool:
        layer = self._document.find_layer(layer_id)
        if layer is None:
            logger.error("Layer or tweens not found")
            return False

        old = _as_tween(old_tween)
        new = _as_tween(new_tween)
        old_type = old.type if isinstance(old_tween, Tween) else old_tween.get("type")
        idx = self._index_of(layer, old.start_frame, old.end_frame, old_type)
        if idx is None:
            logger.warning("Tween not found")
            return False

        current = layer.tweens[idx]
        before = current.model_copy()
        current.start_frame = new.start_frame
        current.end_frame = new.end_frame
        current.type = new.type
        layer.sort_tweens()

        self._events.emit(
            names.TWEEN_UPDATE,
            {
                "layerId": layer_id,
                "oldTween": before.model_dump(by_alias=True),
                "newTween": new.model_dump(by_alias=True),
            },
        )
        self._refresh("updateTween")
        return True

    def get_tween_at_frame(self, layer_id: str, frame: int) -> Optional[Tween]:
        layer = self._document.find_layer(layer_id)
        if layer is None:
            return None
        for tw in layer.tweens:
            if tw.start_frame < frame <= tw.end_frame:
                return tw
        return None

    def is_frame_in_tween(self, layer_id: str, frame: int) -> bool:
        return self.get_tween_at_frame(layer_id, frame) is not None

    def _index_of(
        self, layer: Layer, start_frame: int, end_frame: int, type: Optional[str] = None
    ) -> Optional[int]:
        for idx, tw in enumerate(layer.tweens):
            if tw.start_frame != start_frame or tw.end_frame != end_frame:
                continue
            if type is None or tw.type == type:
                return idx
        return None

    def _refresh(self, source: str) -> None:
        self._events.emit(names.UI_REFRESH, {"source": source})
