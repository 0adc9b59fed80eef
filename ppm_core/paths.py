"""Platform-independent helpers for ppm paths."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from platformdirs import user_config_dir, user_data_dir

STORAGE_DIR_NAME = "plugins-storage"


@dataclass(frozen=True)
class UserDirs:
    """Per-user config and data directories, each overridable for tests."""

    app_name: str = "ppm"
    app_author: str = "ppm"
    config_dir_override: Path | None = None
    data_dir_override: Path | None = None

    def _platform_dir(self, override: Path | None, lookup: Callable[..., str]) -> Path:
        if override is not None:
            return Path(override)
        return Path(lookup(self.app_name, appauthor=self.app_author))

    def config_dir(self) -> Path:
        return self._platform_dir(self.config_dir_override, user_config_dir)

    def data_dir(self) -> Path:
        return self._platform_dir(self.data_dir_override, user_data_dir)

    def storage_dir(self) -> Path:
        """Default root for downloaded archives, sources and the state file."""

        return self.data_dir() / STORAGE_DIR_NAME
