"""Layout helpers for the plugin storage directory."""

from __future__ import annotations

from pathlib import Path

from ppm_core.plugin.errors import StoreError

from .security import path_segments

__all__ = [
    "ARCHIVE_SUFFIX",
    "archives_root",
    "archive_path",
    "sources_root",
    "source_dir",
    "state_path",
]

ARCHIVES_DIR_NAME = "archives"
SOURCES_DIR_NAME = "sources"
STATE_FILE_NAME = "state.json"
ARCHIVE_SUFFIX = ".zip"


def archives_root(root: Path) -> Path:
    return root / ARCHIVES_DIR_NAME


def sources_root(root: Path) -> Path:
    return root / SOURCES_DIR_NAME


def state_path(root: Path) -> Path:
    return archives_root(root) / STATE_FILE_NAME


def archive_path(root: Path, module_name: str, version: str) -> Path:
    version_part = _version_segment(version)
    module_dir = archives_root(root).joinpath(*path_segments("module name", module_name))
    return module_dir / f"{version_part}{ARCHIVE_SUFFIX}"


def source_dir(root: Path, module_name: str, version: str) -> Path:
    version_part = _version_segment(version)
    module_dir = sources_root(root).joinpath(*path_segments("module name", module_name))
    return module_dir / version_part


def _version_segment(version: str) -> str:
    segments = path_segments("version", version)
    if len(segments) != 1:
        raise StoreError(f"version {version!r} must not contain a /")
    return segments[0]
