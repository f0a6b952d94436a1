from __future__ import annotations

from typing import Any

from tweenline.editor import TimelineEditor


def make_test_data() -> dict[str, Any]:
    return {
        "version": "1.0.0",
        "settings": {
            "totalFrames": 100,
            "frameRate": 24,
            "frameWidth": 15,
            "rowHeight": 30,
        },
        "layers": [
            {
                "id": "layer-1",
                "name": "Layer 1",
                "type": "layer",
                "visible": True,
                "locked": False,
                "keyframes": [
                    {"frame": 1, "isEmpty": False},
                    {"frame": 10, "isEmpty": False},
                    {"frame": 20, "isEmpty": True},
                ],
                "tweens": [{"startFrame": 1, "endFrame": 10, "type": "linear"}],
            },
            {
                "id": "folder-1",
                "name": "Folder 1",
                "type": "folder",
                "visible": True,
                "locked": False,
                "children": [
                    {
                        "id": "layer-2",
                        "name": "Layer 2",
                        "type": "layer",
                        "visible": True,
                        "locked": False,
                        "keyframes": [{"frame": 5, "isEmpty": False}],
                        "tweens": [],
                    }
                ],
            },
            {
                "id": "layer-3",
                "name": "Layer 3",
                "type": "layer",
                "visible": False,
                "locked": True,
                "keyframes": [],
                "tweens": [],
            },
        ],
    }


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class Recorder:
    """Collects payloads emitted for one event name."""

    def __init__(self, editor: TimelineEditor, event: str):
        self.calls: list[Any] = []
        editor.events.on(event, self.calls.append)

    @property
    def last(self) -> Any:
        return self.calls[-1]

    def __len__(self) -> int:
        return len(self.calls)


def frames_of(editor: TimelineEditor, layer_id: str) -> list[int]:
    return [kf.frame for kf in editor.document.find_layer(layer_id).keyframes]


def tweens_of(editor: TimelineEditor, layer_id: str) -> list[tuple[int, int, str]]:
    return [(t.start_frame, t.end_frame, t.type) for t in editor.document.find_layer(layer_id).tweens]
