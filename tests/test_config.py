from __future__ import annotations

from pathlib import Path

import pytest

from tweenline.config import (
    ConfigError,
    TimelineConfig,
    find_config,
    load_config,
    load_config_or_default,
)
from tweenline.editor import TimelineEditor


def write(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "tweenline.toml"
    p.write_text(text, encoding="utf-8")
    return p


class TestLoadConfig:
    def test_full_file(self, tmp_path: Path) -> None:
        p = write(
            tmp_path,
            """
[defaults]
total_frames = 48
frame_rate = 12

[playback]
refresh_hz = 30

[logging]
level = "debug"
""",
        )
        cfg = load_config(p)
        assert cfg.defaults.total_frames == 48
        assert cfg.defaults.frame_rate == 12.0
        assert cfg.playback.refresh_hz == 30.0
        assert cfg.logging.level == "DEBUG"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        cfg = load_config(write(tmp_path, ""))
        assert cfg == TimelineConfig()
        assert cfg.defaults.total_frames == 100
        assert cfg.defaults.frame_rate == 24.0

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(tmp_path / "nope.toml")

    def test_bad_toml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Failed to parse TOML") as exc:
            load_config(write(tmp_path, "[defaults\n"))
        assert exc.value.path == tmp_path / "tweenline.toml"

    @pytest.mark.parametrize(
        "body",
        [
            "[defaults]\nspeed = 3\n",
            "[defaults]\nframe_rate = 0\n",
            "[logging]\nlevel = \"chatty\"\n",
            "[playback]\nrefresh_hz = -1\n",
        ],
    )
    def test_invalid_values(self, tmp_path: Path, body: str) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(write(tmp_path, body))


class TestFindConfig:
    def test_walks_up(self, tmp_path: Path) -> None:
        p = write(tmp_path, "")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == p.resolve()

    def test_falls_back_to_start_dir(self, tmp_path: Path) -> None:
        found = find_config(tmp_path)
        if not found.exists():
            assert found == tmp_path / "tweenline.toml"

    def test_load_or_default_without_file(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        if not find_config().exists():
            assert load_config_or_default() == TimelineConfig()


class TestEditorDefaults:
    def test_new_documents_use_configured_defaults(self, tmp_path: Path) -> None:
        cfg = load_config(write(tmp_path, "[defaults]\ntotal_frames = 12\nframe_rate = 6\n"))
        editor = TimelineEditor(config=cfg)
        assert editor.document.settings.total_frames == 12
        assert editor.document.settings.frame_rate == 6.0
        assert editor.playback.frame_interval == pytest.approx(1000 / 6)
