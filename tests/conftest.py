from __future__ import annotations

from typing import Any

import pytest

from helpers import FakeClock, make_test_data
from tweenline.editor import TimelineEditor
from tweenline.playback import ManualTickSource


@pytest.fixture
def test_data() -> dict[str, Any]:
    return make_test_data()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ticks() -> ManualTickSource:
    return ManualTickSource()


@pytest.fixture
def editor(test_data, ticks, clock) -> TimelineEditor:
    return TimelineEditor(test_data, tick_source=ticks, clock=clock)
