from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel

KeyframeType = Literal["content", "blank"]
FrameType = Literal["empty", "standard", "keyframe", "tween"]
NodeType = Literal["layer", "folder"]


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimelineSettings(_Model):
    total_frames: int = 100
    frame_rate: float = 24.0
    frame_width: float = 15.0
    row_height: float = 30.0
    move_playhead_on_frame_click: bool = True


class Keyframe(_Model):
    frame: int
    is_empty: bool = False

    @property
    def kind(self) -> KeyframeType:
        return "blank" if self.is_empty else "content"


class Tween(_Model):
    start_frame: int
    end_frame: int
    type: str = "linear"

    def bounds(self) -> tuple[int, int]:
        return (self.start_frame, self.end_frame)


class Layer(_Model):
    id: str
    name: str = ""
    type: Literal["layer"] = "layer"
    visible: bool = True
    locked: bool = False
    keyframes: list[Keyframe] = Field(default_factory=list)
    tweens: list[Tween] = Field(default_factory=list)

    def keyframe_at(self, frame: int) -> Keyframe | None:
        for kf in self.keyframes:
            if kf.frame == frame:
                return kf
        return None

    def sort_keyframes(self) -> None:
        self.keyframes.sort(key=lambda kf: kf.frame)

    def sort_tweens(self) -> None:
        self.tweens.sort(key=lambda tw: tw.start_frame)


class Folder(_Model):
    id: str
    name: str = ""
    type: Literal["folder"] = "folder"
    visible: bool = True
    locked: bool = False
    children: list[LayerNode] = Field(default_factory=list)


def _node_kind(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
        if kind in ("layer", "folder"):
            return kind
        return "folder" if "children" in value else "layer"
    return getattr(value, "type", "layer")


LayerNode = Annotated[
    Union[Annotated[Layer, Tag("layer")], Annotated[Folder, Tag("folder")]],
    Discriminator(_node_kind),
]

Folder.model_rebuild()


class TimelineData(_Model):
    version: str = "1.0.0"
    settings: TimelineSettings = Field(default_factory=TimelineSettings)
    layers: list[LayerNode] = Field(default_factory=list)
