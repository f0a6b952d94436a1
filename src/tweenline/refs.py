from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


def keyframe_event_id(layer_id: str, frame: int) -> str:
    return f"kf-{layer_id}-{frame}"


@dataclass(frozen=True, order=True)
class FrameRef:
    """A frame cell addressed as ``"<layerId>:<frame>"``."""

    layer_id: str
    frame: int

    @classmethod
    def parse(cls, ref: str) -> "FrameRef":
        layer_id, sep, frame_str = ref.rpartition(":")
        if not sep or not layer_id:
            raise ValueError(f"Malformed frame reference: {ref!r}")
        try:
            frame = int(frame_str)
        except ValueError as e:
            raise ValueError(f"Malformed frame reference: {ref!r}") from e
        return cls(layer_id, frame)

    @property
    def event_id(self) -> str:
        return keyframe_event_id(self.layer_id, self.frame)

    def __str__(self) -> str:
        return f"{self.layer_id}:{self.frame}"


def try_parse(ref: str) -> Optional[FrameRef]:
    try:
        return FrameRef.parse(ref)
    except ValueError as e:
        logger.warning("%s", e)
        return None


def parse_many(refs: Iterable[str]) -> list[FrameRef]:
    out: list[FrameRef] = []
    for ref in refs:
        parsed = try_parse(ref)
        if parsed is not None:
            out.append(parsed)
    return out
