from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, field_validator

from config_binder.models import Delimiter


class FileRotationSettings(BaseModel):
    """How many rotated log files to keep; files roll over at midnight."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    backup_count: int = 5


class FileLoggingSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = "logs/config-binder.log"
    rotation: FileRotationSettings = Field(default_factory=FileRotationSettings)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str = "INFO"
    file: Optional[FileLoggingSettings] = None


class LoaderSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    delimiter: Delimiter = Delimiter.EQUALS
    file_path: str = ".env"
    encoding: str = "utf-8"

    @field_validator("delimiter", mode="before")
    @classmethod
    def _parse_delimiter(cls, value: Any) -> Delimiter:
        return Delimiter.parse(value)


class BinderSettings(BaseModel):
    """Settings for applications that drive the loader from a YAML file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    loader: LoaderSettings = Field(default_factory=LoaderSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def _overlay(defaults: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Return defaults with overrides applied; nested sections are combined key by key."""
    result = dict(defaults)
    for name, value in overrides.items():
        current = result.get(name)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[name] = _overlay(current, value)
        else:
            result[name] = value
    return result


def read_settings(path: Union[str, Path]) -> BinderSettings:
    settings_path = Path(path)
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    data = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Top-level YAML must be a mapping, got: {type(data).__name__}")

    defaults = BinderSettings().model_dump(mode="python")
    return BinderSettings.model_validate(_overlay(defaults, data))
