from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .schema import TimelineSettings

CONFIG_FILENAME = "tweenline.toml"


class DefaultsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    total_frames: int = Field(default=100, gt=0)
    frame_rate: float = Field(default=24.0, gt=0)
    frame_width: float = 15.0
    row_height: float = 30.0
    move_playhead_on_frame_click: bool = True

    def to_settings(self) -> TimelineSettings:
        return TimelineSettings(**self.model_dump())


class PlaybackConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    refresh_hz: float = Field(default=60.0, gt=0)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        name = v.upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"unknown log level '{v}'")
        return name


class TimelineConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    defaults: DefaultsConfig = DefaultsConfig()
    playback: PlaybackConfig = PlaybackConfig()
    logging: LoggingConfig = LoggingConfig()


class ConfigError(Exception):
    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


def load_config(config_path: Path) -> TimelineConfig:
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}", path=config_path)

    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except Exception as e:
        raise ConfigError(f"Failed to parse TOML: {e}", path=config_path) from e

    try:
        return TimelineConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}", path=config_path) from e


def find_config(start_dir: Optional[Path] = None) -> Path:
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()
    while current != current.parent:
        candidate = current / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        current = current.parent

    return start_dir / CONFIG_FILENAME


def load_config_or_default(config_path: Optional[Path] = None) -> TimelineConfig:
    if config_path is None:
        config_path = find_config()
        if not config_path.exists():
            return TimelineConfig()
    return load_config(config_path)
