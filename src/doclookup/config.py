"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (DOCLOOKUP__ARCHIVES__DIRECTORY=/srv/javadocs)
  2. doclookup.yaml         (searched in cwd, then ~/.config/doclookup/)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("doclookup")
_DEFAULT_ARCHIVE_DIR = str(Path(_DEFAULT_DATA_DIR) / "javadocs")


def _find_config_file() -> str | None:
    """Return the path of the first doclookup.yaml found, or None."""
    candidates = [
        Path("doclookup.yaml"),
        Path.home() / ".config" / "doclookup" / "doclookup.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ArchiveSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    directory: str = _DEFAULT_ARCHIVE_DIR
    extension: str = ".zip"

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"Invalid archive extension: {v!r}")
        return v

    @property
    def path(self) -> Path:
        return Path(self.directory).expanduser()


class WatcherSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    debounce_ms: int = 500
    force_polling: bool = False
    poll_delay_ms: int = 300


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: DOCLOOKUP__WATCHER__ENABLED=false
        env_prefix="DOCLOOKUP__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    archives: ArchiveSettings = ArchiveSettings()
    watcher: WatcherSettings = WatcherSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
