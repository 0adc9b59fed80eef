"""Resolve where plugins are stored, honoring layered configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import tomllib

from .paths import UserDirs

CONFIG_FILE_NAME = "config.toml"
SETTINGS_TABLE = "ppm"

_ENV_KEY_MAP: dict[str, str] = {
    "storage_dir": "PPM_STORAGE_DIR",
    "local_root": "PPM_LOCAL_ROOT",
}


def _load_settings_table(path: Path | None) -> dict[str, str]:
    if path is None or not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    table = data.get(SETTINGS_TABLE)
    if not isinstance(table, dict):
        return {}
    return {key: str(value) for key, value in table.items()}


@dataclass(frozen=True)
class Settings:
    storage_dir: Path
    local_root: Path


@dataclass
class SettingsResolver:
    """Resolve settings from overrides, env, project file, user file, defaults."""

    config_path: Path | None = None
    user_dirs: UserDirs | None = None
    overrides: Mapping[str, str] | None = None
    env: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        self.user_dirs = self.user_dirs or UserDirs()
        self.overrides = {key: value for key, value in (self.overrides or {}).items() if value}
        self.env = self.env if self.env is not None else os.environ

    def resolve_setting(self, key: str) -> str | None:
        if value := self.overrides.get(key):
            return value
        alias = _ENV_KEY_MAP.get(key)
        if alias and (value := self.env.get(alias)):
            return value
        if value := _load_settings_table(self.config_path).get(key):
            return value
        user_config = self.user_dirs.config_dir() / CONFIG_FILE_NAME
        if value := _load_settings_table(user_config).get(key):
            return value
        return self._defaults().get(key)

    def resolve(self) -> Settings:
        return Settings(
            storage_dir=Path(self.resolve_setting("storage_dir") or "").expanduser(),
            local_root=Path(self.resolve_setting("local_root") or "").expanduser(),
        )

    def _defaults(self) -> dict[str, str]:
        return {
            "storage_dir": str(self.user_dirs.storage_dir()),
            "local_root": "./plugins-local",
        }
