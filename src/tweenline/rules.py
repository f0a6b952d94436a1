from __future__ import annotations

from typing import Any, Iterable, Iterator

from .schema import Folder, Layer, TimelineData


class InvalidFormat(ValueError):
    """Raised when serialized timeline data fails structural validation."""


def _fail(reason: str) -> InvalidFormat:
    return InvalidFormat(f"Invalid timeline data: {reason}")


def _positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value > 0


def check_document_shape(raw: Any) -> None:
    """Check the fields a document must carry before it can be loaded.

    Only the conditions below are enforced; everything else falls back to model
    defaults. Raises InvalidFormat naming the first offending field.
    """
    if not isinstance(raw, dict):
        raise _fail("document root must be an object")
    if raw.get("version") is None:
        raise _fail("missing version field")
    if raw.get("settings") is None:
        raise _fail("missing settings field")
    if raw.get("layers") is None:
        raise _fail("missing layers field")

    settings = raw["settings"]
    if not isinstance(settings, dict):
        raise _fail("settings must be an object")
    if not _positive_number(settings.get("totalFrames", settings.get("total_frames"))):
        raise _fail("totalFrames must be a positive number")
    if not _positive_number(settings.get("frameRate", settings.get("frame_rate"))):
        raise _fail("frameRate must be a positive number")

    if not isinstance(raw["layers"], list):
        raise _fail("layers must be a list")
    _check_nodes(raw["layers"])


def _check_nodes(nodes: Iterable[Any]) -> None:
    for node in nodes:
        if not isinstance(node, dict):
            raise _fail("layer must have a valid id")
        node_id = node.get("id")
        if not isinstance(node_id, str) or not node_id:
            raise _fail("layer must have a valid id")
        children = node.get("children")
        if node.get("type") == "folder" or children is not None:
            if children is not None and not isinstance(children, list):
                raise _fail(f"folder {node_id} children must be a list")
            _check_nodes(children or [])


def walk(nodes: Iterable[Layer | Folder]) -> Iterator[Layer | Folder]:
    for node in nodes:
        yield node
        if isinstance(node, Folder):
            yield from walk(node.children)


def lint(data: TimelineData) -> list[str]:
    """Report consistency problems a loaded document may carry.

    Tweens are only validated at creation time, so frame shifting can leave a
    tween whose bounds no longer sit on keyframes. Those show up here.
    """
    warnings: list[str] = []
    seen: set[str] = set()
    total = data.settings.total_frames

    for node in walk(data.layers):
        if node.id in seen:
            warnings.append(f"Duplicate id: {node.id}")
        seen.add(node.id)
        if not isinstance(node, Layer):
            continue

        frames = [kf.frame for kf in node.keyframes]
        if frames != sorted(frames):
            warnings.append(f"{node.id}: keyframes are not sorted")
        if len(frames) != len(set(frames)):
            warnings.append(f"{node.id}: duplicate keyframe frames")
        for f in frames:
            if f < 1 or f > total:
                warnings.append(f"{node.id}: keyframe at frame {f} is outside 1..{total}")

        keyed = set(frames)
        previous = None
        for tw in sorted(node.tweens, key=lambda t: t.start_frame):
            label = f"{node.id}: tween ({tw.start_frame}, {tw.end_frame})"
            if tw.start_frame >= tw.end_frame:
                warnings.append(f"{label} has start frame not before end frame")
            if tw.start_frame not in keyed:
                warnings.append(f"{label} start frame has no keyframe")
            if tw.end_frame not in keyed:
                warnings.append(f"{label} end frame has no keyframe")
            if previous is not None and tw.start_frame < previous.end_frame:
                warnings.append(
                    f"{label} overlaps tween ({previous.start_frame}, {previous.end_frame})"
                )
            previous = tw

    return warnings
