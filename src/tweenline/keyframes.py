from __future__ import annotations

import logging
from typing import Optional, Sequence

from .document import TimelineDocument
from .events import EventBus, Veto, names
from .refs import FrameRef, keyframe_event_id, parse_many, try_parse
from .schema import Keyframe, Layer
from .store import Clipboard, ClipboardEntry

logger = logging.getLogger(__name__)


class KeyframeSequencer:
    """Keyframe and frame-range edits on individual layers.

    Frame shifting follows the timeline's insert/delete-frame semantics:
    inserting a frame pushes everything at or after it one frame later,
    deleting a range pulls everything after it earlier by the range width.
    Tween bounds are shifted alongside but are not re-checked afterwards.
    """

    def __init__(self, document: TimelineDocument, events: EventBus, clipboard: Clipboard):
        self._document = document
        self._events = events
        self._clipboard = clipboard

    def insert_keyframe(self, layer_id: str, frame: int) -> bool:
        return self._insert(layer_id, frame, is_empty=False)

    def insert_blank_keyframe(self, layer_id: str, frame: int) -> bool:
        return self._insert(layer_id, frame, is_empty=True)

    def _insert(self, layer_id: str, frame: int, is_empty: bool) -> bool:
        layer = self._layer(layer_id)
        if layer is None:
            return False
        if frame < 1:
            logger.warning("Frame %d is out of range", frame)
            return False
        if layer.keyframe_at(frame) is not None:
            logger.warning("Keyframe already exists at frame %d", frame)
            return False

        kf = Keyframe(frame=frame, is_empty=is_empty)
        layer.keyframes.append(kf)
        layer.sort_keyframes()

        self._events.emit(
            names.KEYFRAME_ADD,
            {
                "id": keyframe_event_id(layer_id, frame),
                "layerId": layer_id,
                "frame": frame,
                "type": kf.kind,
            },
        )
        self._events.emit(names.KEYFRAME_ADDED, {"layerId": layer_id, "frame": frame, "isEmpty": is_empty})
        self._refresh("insertKeyframe")
        return True

    def insert_frame(self, layer_id: str, frame: int) -> bool:
        layer = self._layer(layer_id)
        if layer is None:
            return False

        for kf in layer.keyframes:
            if kf.frame >= frame:
                kf.frame += 1

        for tw in layer.tweens:
            if tw.start_frame >= frame:
                tw.start_frame += 1
                tw.end_frame += 1
            elif tw.end_frame >= frame:
                tw.end_frame += 1

        self._events.emit(names.FRAME_INSERTED, {"layerId": layer_id, "frame": frame})
        self._refresh("insertFrame")
        return True

    def delete_frames(self, layer_id: str, frame_start: int, frame_end: int) -> bool:
        layer = self._layer(layer_id)
        if layer is None:
            return False
        if frame_end < frame_start:
            logger.warning("Invalid frame range %d-%d", frame_start, frame_end)
            return False

        ids = [
            keyframe_event_id(layer_id, kf.frame)
            for kf in layer.keyframes
            if frame_start <= kf.frame <= frame_end
        ]
        if self._events.emit_cancellable(names.BEFORE_KEYFRAME_DELETE, {"ids": ids}) is Veto.CANCELLED:
            return False

        count = frame_end - frame_start + 1

        layer.keyframes = [kf for kf in layer.keyframes if kf.frame < frame_start or kf.frame > frame_end]
        for kf in layer.keyframes:
            if kf.frame > frame_end:
                kf.frame -= count

        layer.tweens = [
            tw for tw in layer.tweens
            if not (tw.start_frame >= frame_start and tw.end_frame <= frame_end)
        ]
        # A tween starting inside the range and ending after it is left as is.
        for tw in layer.tweens:
            if tw.start_frame > frame_end:
                tw.start_frame -= count
                tw.end_frame -= count
            elif tw.end_frame > frame_end and tw.start_frame < frame_start:
                tw.end_frame -= count

        self._events.emit(names.KEYFRAME_DELETE, {"ids": ids})
        self._events.emit(
            names.FRAMES_DELETED,
            {"layerId": layer_id, "frameStart": frame_start, "frameEnd": frame_end},
        )
        self._refresh("deleteFrames")
        return True

    def delete_keyframe(self, layer_id: str, frame: int) -> bool:
        layer = self._layer(layer_id)
        if layer is None:
            return False
        if layer.keyframe_at(frame) is None:
            logger.warning("No keyframe at frame %d on layer %s", frame, layer_id)
            return False

        kf_id = keyframe_event_id(layer_id, frame)
        if self._events.emit_cancellable(names.BEFORE_KEYFRAME_DELETE, {"ids": [kf_id]}) is Veto.CANCELLED:
            return False

        layer.keyframes = [kf for kf in layer.keyframes if kf.frame != frame]

        self._events.emit(names.KEYFRAME_DELETE, {"ids": [kf_id]})
        self._events.emit(names.KEYFRAME_DELETED, {"layerId": layer_id, "frame": frame})
        self._refresh("deleteKeyframe")
        return True

    def move_keyframes(self, frame_refs: Sequence[str], target_layer_id: str, target_frame: int) -> bool:
        if not frame_refs:
            return False

        anchor = try_parse(frame_refs[0])
        if anchor is None:
            return False
        source_layer = self._document.find_layer(anchor.layer_id)
        target_layer = self._document.find_layer(target_layer_id)
        if source_layer is None or target_layer is None:
            logger.error("Source or target layer not found")
            return False

        offset = target_frame - anchor.frame
        refs = parse_many(frame_refs)
        moving = set(refs)

        relocated: list[Keyframe] = []
        sources: list[tuple[Layer, int]] = []
        moves: list[dict] = []
        for ref in refs:
            layer = self._document.find_layer(ref.layer_id)
            kf = layer.keyframe_at(ref.frame) if layer is not None else None
            if kf is None:
                continue
            new_frame = kf.frame + offset
            if new_frame < 1:
                logger.warning("Move would place keyframe before frame 1")
                return False
            relocated.append(kf.model_copy(update={"frame": new_frame}))
            sources.append((layer, ref.frame))
            moves.append({"id": ref.event_id, "oldFrame": ref.frame, "newFrame": new_frame})

        if not relocated:
            logger.warning("No keyframes to move")
            return False

        destinations = [kf.frame for kf in relocated]
        if len(destinations) != len(set(destinations)):
            logger.warning("Conflict detected at target position")
            return False
        for frame in destinations:
            existing = target_layer.keyframe_at(frame)
            if existing is not None and FrameRef(target_layer_id, frame) not in moving:
                logger.warning("Conflict detected at target position")
                return False

        for layer, frame in sources:
            layer.keyframes = [kf for kf in layer.keyframes if kf.frame != frame]
        target_layer.keyframes.extend(relocated)
        target_layer.sort_keyframes()

        self._events.emit(names.KEYFRAME_MOVE, {"moves": moves})
        self._events.emit(
            names.KEYFRAMES_MOVED,
            {
                "frameIds": list(frame_refs),
                "targetLayerId": target_layer_id,
                "targetFrame": target_frame,
                "frameOffset": offset,
            },
        )
        self._refresh("moveKeyframes")
        return True

    def copy_keyframes(self, frame_refs: Sequence[str]) -> int:
        if not frame_refs:
            logger.warning("No keyframes selected to copy")
            return 0

        entries: list[ClipboardEntry] = []
        for ref in parse_many(frame_refs):
            layer = self._document.find_layer(ref.layer_id)
            kf = layer.keyframe_at(ref.frame) if layer is not None else None
            if kf is not None:
                entries.append(ClipboardEntry(ref.layer_id, ref.frame, kf))

        if not entries:
            logger.warning("No valid keyframes to copy")
            return 0

        self._clipboard.put(entries)
        self._events.emit(names.KEYFRAMES_COPIED, {"count": len(entries)})
        logger.info("Copied %d keyframes to clipboard", len(entries))
        return len(entries)

    def paste_keyframes(self, target_layer_id: str, target_frame: int) -> int:
        entries = self._clipboard.entries()
        if not entries:
            logger.warning("No keyframes in clipboard")
            return 0

        target = self._document.find_layer(target_layer_id)
        if target is None:
            logger.error("Target layer %s not found", target_layer_id)
            return 0

        offset = target_frame - min(e.frame for e in entries)
        pasted: list[Keyframe] = []
        for entry in entries:
            new_frame = entry.frame + offset
            taken = target.keyframe_at(new_frame) is not None or any(k.frame == new_frame for k in pasted)
            if taken or new_frame < 1:
                logger.warning("Skipping frame %d - conflict detected", new_frame)
                continue
            pasted.append(entry.keyframe.model_copy(update={"frame": new_frame}))

        if not pasted:
            logger.warning("All frames conflict - nothing pasted")
            return 0

        target.keyframes.extend(pasted)
        target.sort_keyframes()

        self._events.emit(
            names.KEYFRAMES_PASTED,
            {"targetLayerId": target_layer_id, "targetFrame": target_frame, "count": len(pasted)},
        )
        self._refresh("pasteKeyframes")
        logger.info("Pasted %d keyframes at frame %d", len(pasted), target_frame)
        return len(pasted)

    def _layer(self, layer_id: str) -> Optional[Layer]:
        layer = self._document.find_layer(layer_id)
        if layer is None:
            logger.error("Layer %s not found", layer_id)
        return layer

    def _refresh(self, source: str) -> None:
        self._events.emit(names.UI_REFRESH, {"source": source})
