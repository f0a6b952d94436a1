from __future__ import annotations

import logging

from helpers import Recorder, frames_of, tweens_of
from tweenline.editor import TimelineEditor


class TestInsertKeyframe:
    def test_insert_keeps_order(self, editor: TimelineEditor) -> None:
        assert editor.keyframes.insert_keyframe("layer-1", 5) is True
        assert editor.keyframes.insert_keyframe("layer-1", 15) is True
        assert editor.keyframes.insert_keyframe("layer-1", 3) is True
        assert frames_of(editor, "layer-1") == [1, 3, 5, 10, 15, 20]

    def test_insert_blank(self, editor: TimelineEditor) -> None:
        assert editor.keyframes.insert_blank_keyframe("layer-3", 7) is True
        kf = editor.document.find_layer("layer-3").keyframe_at(7)
        assert kf.is_empty is True
        assert kf.kind == "blank"

    def test_duplicate_is_refused(self, editor: TimelineEditor, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="tweenline.keyframes"):
            assert editor.keyframes.insert_keyframe("layer-1", 10) is False
        assert "Keyframe already exists at frame 10" in caplog.text
        assert frames_of(editor, "layer-1") == [1, 10, 20]

    def test_frame_below_one(self, editor: TimelineEditor) -> None:
        assert editor.keyframes.insert_keyframe("layer-1", 0) is False

    def test_missing_layer(self, editor: TimelineEditor, caplog) -> None:
        with caplog.at_level(logging.ERROR, logger="tweenline.keyframes"):
            assert editor.keyframes.insert_keyframe("missing", 5) is False
        assert "Layer missing not found" in caplog.text

    def test_events(self, editor: TimelineEditor) -> None:
        added = Recorder(editor, "onKeyframeAdd")
        legacy = Recorder(editor, "keyframe:added")
        editor.keyframes.insert_keyframe("layer-1", 5)
        assert added.last == {"id": "kf-layer-1-5", "layerId": "layer-1", "frame": 5, "type": "content"}
        assert legacy.last == {"layerId": "layer-1", "frame": 5, "isEmpty": False}


class TestInsertFrame:
    def test_shifts_keyframes_and_tweens(self, editor: TimelineEditor) -> None:
        inserted = Recorder(editor, "frame:inserted")
        assert editor.keyframes.insert_frame("layer-1", 5) is True
        assert frames_of(editor, "layer-1") == [1, 11, 21]
        assert tweens_of(editor, "layer-1") == [(1, 11, "linear")]
        assert inserted.last == {"layerId": "layer-1", "frame": 5}

    def test_insert_at_keyframe_pushes_it(self, editor: TimelineEditor) -> None:
        editor.keyframes.insert_frame("layer-1", 1)
        assert frames_of(editor, "layer-1") == [2, 11, 21]
        assert tweens_of(editor, "layer-1") == [(2, 11, "linear")]

    def test_other_layers_untouched(self, editor: TimelineEditor) -> None:
        editor.keyframes.insert_frame("layer-1", 1)
        assert frames_of(editor, "layer-2") == [5]


class TestDeleteFrames:
    def test_delete_single_frame(self, editor: TimelineEditor) -> None:
        deleted = Recorder(editor, "onKeyframeDelete")
        assert editor.keyframes.delete_frames("layer-1", 10, 10) is True
        assert frames_of(editor, "layer-1") == [1, 19]
        # end bound 10 is not after the range, so the tween is kept unchanged
        assert tweens_of(editor, "layer-1") == [(1, 10, "linear")]
        assert deleted.last == {"ids": ["kf-layer-1-10"]}

    def test_tween_inside_range_is_dropped(self, editor: TimelineEditor) -> None:
        editor.keyframes.delete_frames("layer-1", 1, 10)
        assert frames_of(editor, "layer-1") == [10]
        assert tweens_of(editor, "layer-1") == []

    def test_tween_spanning_range_shrinks(self, editor: TimelineEditor) -> None:
        editor.keyframes.delete_frames("layer-1", 4, 6)
        assert frames_of(editor, "layer-1") == [1, 7, 17]
        assert tweens_of(editor, "layer-1") == [(1, 7, "linear")]

    def test_tween_after_range_shifts(self, editor: TimelineEditor) -> None:
        editor.tweens.create_motion_tween("layer-1", 10, 20)
        editor.keyframes.delete_frames("layer-1", 2, 3)
        assert frames_of(editor, "layer-1") == [1, 8, 18]
        assert tweens_of(editor, "layer-1") == [(1, 8, "linear"), (8, 18, "linear")]

    def test_tween_starting_inside_range_is_not_adjusted(self, editor: TimelineEditor) -> None:
        editor.tweens.create_motion_tween("layer-1", 10, 20)
        editor.keyframes.delete_frames("layer-1", 5, 12)
        assert frames_of(editor, "layer-1") == [1, 12]
        assert (10, 20, "linear") in tweens_of(editor, "layer-1")
        problems = editor.document.lint()
        assert any("end frame has no keyframe" in p for p in problems)

    def test_insert_then_delete_restores(self, editor: TimelineEditor) -> None:
        editor.keyframes.insert_frame("layer-1", 5)
        editor.keyframes.delete_frames("layer-1", 5, 5)
        assert frames_of(editor, "layer-1") == [1, 10, 20]
        assert tweens_of(editor, "layer-1") == [(1, 10, "linear")]

    def test_reversed_range(self, editor: TimelineEditor) -> None:
        assert editor.keyframes.delete_frames("layer-1", 10, 5) is False
        assert frames_of(editor, "layer-1") == [1, 10, 20]

    def test_veto(self, editor: TimelineEditor) -> None:
        editor.events.on("onBeforeKeyframeDelete", lambda e: e.prevent_default())
        assert editor.keyframes.delete_frames("layer-1", 1, 20) is False
        assert frames_of(editor, "layer-1") == [1, 10, 20]


class TestDeleteKeyframe:
    def test_delete(self, editor: TimelineEditor) -> None:
        legacy = Recorder(editor, "keyframe:deleted")
        assert editor.keyframes.delete_keyframe("layer-1", 20) is True
        assert frames_of(editor, "layer-1") == [1, 10]
        assert legacy.last == {"layerId": "layer-1", "frame": 20}

    def test_delete_does_not_shift(self, editor: TimelineEditor) -> None:
        editor.keyframes.delete_keyframe("layer-1", 10)
        assert frames_of(editor, "layer-1") == [1, 20]

    def test_no_keyframe(self, editor: TimelineEditor) -> None:
        assert editor.keyframes.delete_keyframe("layer-1", 7) is False


class TestMove:
    def test_move_single(self, editor: TimelineEditor) -> None:
        moved = Recorder(editor, "onKeyframeMove")
        assert editor.keyframes.move_keyframes(["layer-1:20"], "layer-1", 30) is True
        assert frames_of(editor, "layer-1") == [1, 10, 30]
        assert moved.last == {"moves": [{"id": "kf-layer-1-20", "oldFrame": 20, "newFrame": 30}]}
        assert editor.document.find_layer("layer-1").keyframe_at(30).is_empty is True

    def test_move_group_keeps_spacing(self, editor: TimelineEditor) -> None:
        assert editor.keyframes.move_keyframes(["layer-1:10", "layer-1:20"], "layer-1", 40) is True
        assert frames_of(editor, "layer-1") == [1, 40, 50]

    def test_move_onto_own_source_frames(self, editor: TimelineEditor) -> None:
        assert editor.keyframes.move_keyframes(["layer-1:1", "layer-1:10"], "layer-1", 10) is True
        assert frames_of(editor, "layer-1") == [10, 19, 20]

    def test_collision_moves_nothing(self, editor: TimelineEditor) -> None:
        assert editor.keyframes.move_keyframes(["layer-1:1", "layer-1:10"], "layer-1", 11) is False
        assert frames_of(editor, "layer-1") == [1, 10, 20]

    def test_move_across_layers(self, editor: TimelineEditor) -> None:
        legacy = Recorder(editor, "keyframes:moved")
        assert editor.keyframes.move_keyframes(["layer-2:5"], "layer-3", 8) is True
        assert frames_of(editor, "layer-2") == []
        assert frames_of(editor, "layer-3") == [8]
        assert legacy.last["frameOffset"] == 3
        assert legacy.last["targetLayerId"] == "layer-3"

    def test_rejects(self, editor: TimelineEditor) -> None:
        assert editor.keyframes.move_keyframes([], "layer-1", 5) is False
        assert editor.keyframes.move_keyframes(["garbage"], "layer-1", 5) is False
        assert editor.keyframes.move_keyframes(["layer-1:10"], "missing", 5) is False
        assert editor.keyframes.move_keyframes(["layer-1:10"], "layer-1", -3) is False
        assert frames_of(editor, "layer-1") == [1, 10, 20]

    def test_nothing_resolves(self, editor: TimelineEditor) -> None:
        moved = Recorder(editor, "onKeyframeMove")
        refresh = Recorder(editor, "ui:refresh")
        assert editor.keyframes.move_keyframes(["layer-1:7"], "layer-1", 30) is False
        assert len(moved) == 0
        assert len(refresh) == 0


class TestClipboard:
    def test_copy_and_paste(self, editor: TimelineEditor) -> None:
        pasted = Recorder(editor, "keyframes:pasted")
        assert editor.keyframes.copy_keyframes(["layer-1:10", "layer-1:20"]) == 2
        assert len(editor.clipboard) == 2
        assert editor.keyframes.paste_keyframes("layer-3", 50) == 2
        assert frames_of(editor, "layer-3") == [50, 60]
        assert editor.document.find_layer("layer-3").keyframe_at(60).is_empty is True
        assert pasted.last == {"targetLayerId": "layer-3", "targetFrame": 50, "count": 2}

    def test_paste_skips_taken_frames(self, editor: TimelineEditor) -> None:
        editor.keyframes.copy_keyframes(["layer-1:1", "layer-1:10"])
        assert editor.keyframes.paste_keyframes("layer-1", 10) == 1
        assert frames_of(editor, "layer-1") == [1, 10, 19, 20]

    def test_everything_conflicts(self, editor: TimelineEditor) -> None:
        editor.keyframes.copy_keyframes(["layer-1:1", "layer-1:10"])
        assert editor.keyframes.paste_keyframes("layer-1", 1) == 0

    def test_clipboard_is_a_snapshot(self, editor: TimelineEditor) -> None:
        editor.keyframes.copy_keyframes(["layer-1:10"])
        editor.document.find_layer("layer-1").keyframe_at(10).is_empty = True
        editor.keyframes.paste_keyframes("layer-3", 3)
        assert editor.document.find_layer("layer-3").keyframe_at(3).is_empty is False

    def test_empty_clipboard(self, editor: TimelineEditor, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="tweenline.keyframes"):
            assert editor.keyframes.paste_keyframes("layer-1", 50) == 0
        assert "No keyframes in clipboard" in caplog.text

    def test_copy_nothing(self, editor: TimelineEditor) -> None:
        assert editor.keyframes.copy_keyframes([]) == 0
        assert editor.keyframes.copy_keyframes(["layer-1:7"]) == 0
        assert editor.clipboard.is_empty()
