from __future__ import annotations

# Layer tree
OBJECT_ADD = "onObjectAdd"
OBJECT_DELETE = "onObjectDelete"
BEFORE_OBJECT_DELETE = "onBeforeObjectDelete"
OBJECT_RENAME = "onObjectRename"
OBJECT_REORDER = "onObjectReorder"
OBJECT_REPARENT = "onObjectReparent"
OBJECT_VISIBILITY_CHANGE = "onObjectVisibilityChange"
OBJECT_LOCK_CHANGE = "onObjectLockChange"

# Keyframes
KEYFRAME_ADD = "onKeyframeAdd"
KEYFRAME_DELETE = "onKeyframeDelete"
BEFORE_KEYFRAME_DELETE = "onBeforeKeyframeDelete"
KEYFRAME_MOVE = "onKeyframeMove"
KEYFRAME_SELECT = "onKeyframeSelect"
KEYFRAMES_COPIED = "keyframes:copied"
KEYFRAMES_PASTED = "keyframes:pasted"
FRAME_INSERTED = "frame:inserted"
KEYFRAME_ADDED = "keyframe:added"
KEYFRAME_DELETED = "keyframe:deleted"
FRAMES_DELETED = "frames:deleted"
KEYFRAMES_MOVED = "keyframes:moved"

# Tweens
TWEEN_ADD = "onTweenAdd"
TWEEN_REMOVE = "onTweenRemove"
TWEEN_UPDATE = "onTweenUpdate"

# Playback
PLAYBACK_START = "onPlaybackStart"
PLAYBACK_PAUSE = "onPlaybackPause"
FRAME_ENTER = "onFrameEnter"
PLAYBACK_STARTED = "playback:started"
PLAYBACK_PAUSED = "playback:paused"
PLAYBACK_STOPPED = "playback:stopped"
PLAYBACK_LOOP = "playback:loop"
PLAYBACK_FRAME_ENTER = "playback:frameEnter"
PLAYBACK_FRAME_CHANGED = "playback:frameChanged"

# Selection
SELECTION_CHANGED = "selection:changed"

# State store
STATE_CHANGE = "state:change"
STATE_BATCH_CHANGE = "state:batch-change"

# Generic re-render request for external collaborators
UI_REFRESH = "ui:refresh"


def state_change_for(key: str) -> str:
    return f"{STATE_CHANGE}:{key}"
