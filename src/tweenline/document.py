from __future__ import annotations

import json
import logging
from typing import Any, Iterator, Mapping, Optional, Union

from pydantic import ValidationError

from .refs import keyframe_event_id
from .rules import InvalidFormat, check_document_shape, lint, walk
from .schema import Folder, FrameType, Layer, TimelineData, TimelineSettings

logger = logging.getLogger(__name__)

Node = Union[Layer, Folder]


def _coerce(doc: Union[TimelineData, Mapping[str, Any]]) -> TimelineData:
    if isinstance(doc, TimelineData):
        return doc
    return TimelineData.model_validate(dict(doc))


class TimelineDocument:
    """Owns the timeline tree shared by every editing service.

    ``data`` is the live, mutable tree. Services mutate it in place;
    ``get_data()`` hands out detached copies.
    """

    def __init__(self, data: Union[TimelineData, Mapping[str, Any], None] = None):
        self.data: TimelineData = TimelineData() if data is None else _coerce(data)

    def load(self, doc: Union[TimelineData, Mapping[str, Any]]) -> None:
        self.data = _coerce(doc)

    def get_data(self) -> TimelineData:
        return self.data.model_copy(deep=True)

    @property
    def settings(self) -> TimelineSettings:
        return self.data.settings

    def to_dict(self) -> dict[str, Any]:
        return self.data.model_dump(mode="json", by_alias=True)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def from_json(self, text: str) -> None:
        try:
            raw = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            raise InvalidFormat(f"Invalid JSON: {e}") from e
        self.from_dict(raw)

    def from_dict(self, raw: Any) -> None:
        check_document_shape(raw)
        try:
            parsed = TimelineData.model_validate(raw)
        except ValidationError as e:
            raise InvalidFormat(f"Invalid timeline data: {e}") from e
        self.data = parsed
        logger.debug("Loaded timeline %s with %d root nodes", parsed.version, len(parsed.layers))

    # -- traversal -------------------------------------------------------

    def iter_nodes(self) -> Iterator[Node]:
        return walk(self.data.layers)

    def iter_layers(self) -> Iterator[Layer]:
        return (n for n in self.iter_nodes() if isinstance(n, Layer))

    def find_node(self, node_id: str) -> Optional[Node]:
        for node in self.iter_nodes():
            if node.id == node_id:
                return node
        return None

    def find_layer(self, layer_id: str) -> Optional[Layer]:
        node = self.find_node(layer_id)
        return node if isinstance(node, Layer) else None

    def find_parent(self, node_id: str) -> Optional[tuple[Optional[Folder], list[Node], int]]:
        """Locate a node's container: (parent folder or None for root, siblings, index)."""
        return self._find_parent_in(None, self.data.layers, node_id)

    def _find_parent_in(self, parent, siblings, node_id):
        for idx, node in enumerate(siblings):
            if node.id == node_id:
                return parent, siblings, idx
            if isinstance(node, Folder):
                found = self._find_parent_in(node, node.children, node_id)
                if found is not None:
                    return found
        return None

    def has_id(self, node_id: str) -> bool:
        return self.find_node(node_id) is not None

    # -- queries ---------------------------------------------------------

    def keyframes_at_frame(self, frame: int) -> list[str]:
        return [
            keyframe_event_id(layer.id, kf.frame)
            for layer in self.iter_layers()
            for kf in layer.keyframes
            if kf.frame == frame
        ]

    def frame_type(self, layer_id: str, frame: int) -> FrameType:
        layer = self.find_layer(layer_id)
        if layer is None:
            return "empty"
        if layer.keyframe_at(frame) is not None:
            return "keyframe"
        if any(tw.start_frame <= frame <= tw.end_frame for tw in layer.tweens):
            return "tween"
        if any(kf.frame < frame for kf in layer.keyframes):
            return "standard"
        return "empty"

    def current_time(self, frame: int) -> float:
        return (frame - 1) / self.settings.frame_rate

    @property
    def duration(self) -> float:
        return self.settings.total_frames / self.settings.frame_rate

    def stats(self) -> dict[str, int]:
        nodes = list(self.iter_nodes())
        layers = [n for n in nodes if isinstance(n, Layer)]
        return {
            "nodes": len(nodes),
            "layers": len(layers),
            "folders": len(nodes) - len(layers),
            "keyframes": sum(len(l.keyframes) for l in layers),
            "tweens": sum(len(l.tweens) for l in layers),
        }

    def lint(self) -> list[str]:
        return lint(self.data)
