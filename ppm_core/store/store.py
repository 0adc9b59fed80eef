"""Filesystem side of the plugin client: archive cache, sources, state."""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Any, Mapping

from ppm_core.plugin.errors import StoreError
from ppm_core.plugin.references import PluginReference

from . import layout
from .security import common_top_dir, resolve_inside

logger = logging.getLogger(__name__)


class LocalPluginStore:
    """Own the archives/, sources/ and state file under one storage root."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def archive_path(self, module_name: str, version: str) -> Path:
        return self._inside_root(layout.archive_path(self.root, module_name, version))

    def source_dir(self, module_name: str, version: str) -> Path:
        return self._inside_root(layout.source_dir(self.root, module_name, version))

    def _inside_root(self, path: Path) -> Path:
        # symlinked module dirs must not lead out of the store either
        resolve_inside(self.root, str(path.relative_to(self.root)))
        return path

    @property
    def state_path(self) -> Path:
        return layout.state_path(self.root)

    # ------------------------- archives -------------------------

    def clean_archives(self, references: Mapping[str, PluginReference]) -> None:
        """Delete cached archives that no reference points at any more."""

        archives = layout.archives_root(self.root)
        if not archives.exists():
            return

        wanted = {
            self.archive_path(ref.module_name, ref.version).resolve()
            for ref in references.values()
        }
        try:
            for archive in sorted(archives.rglob(f"*{layout.ARCHIVE_SUFFIX}")):
                if archive.resolve() in wanted:
                    continue
                logger.debug("removing stale archive %s", archive)
                archive.unlink()
            self._prune_empty_dirs(archives)
        except OSError as exc:
            raise StoreError(f"unable to clean archives in {archives}: {exc}") from exc

    def unzip(self, module_name: str, version: str) -> Path:
        """Extract the cached archive into the module's versioned directory."""

        archive = self.archive_path(module_name, version)
        if not archive.is_file():
            raise StoreError(f"archive not found for {module_name}@{version}: {archive}")

        destination = self.source_dir(module_name, version)
        try:
            if destination.exists():
                shutil.rmtree(destination)
            destination.mkdir(parents=True)
            with zipfile.ZipFile(archive) as bundle:
                self._extract(bundle, destination)
        except (OSError, zipfile.BadZipFile) as exc:
            raise StoreError(f"unable to unzip {archive}: {exc}") from exc
        return destination

    def _extract(self, bundle: zipfile.ZipFile, destination: Path) -> None:
        members = bundle.infolist()
        prefix = common_top_dir([member.filename for member in members])
        for member in members:
            name = member.filename.lstrip("/")
            if prefix:
                name = name[len(prefix) + 1 :]
            if not name:
                continue
            target = resolve_inside(destination, name)
            if member.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            with bundle.open(member) as src, target.open("wb") as dst:
                shutil.copyfileobj(src, dst)

    def reset_all(self) -> None:
        """Remove every archive, extracted source and the state file."""

        for directory in (layout.archives_root(self.root), layout.sources_root(self.root)):
            if directory.exists():
                shutil.rmtree(directory)

    # ------------------------- state -------------------------

    def write_state(self, references: Mapping[str, PluginReference]) -> Path:
        """Replace the installed plugin set with ``references``."""

        payload = {alias: references[alias].to_dict() for alias in sorted(references)}
        path = self.state_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".state-", dir=path.parent)
        except OSError as exc:
            raise StoreError(f"unable to write plugins state to {path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=2, sort_keys=True)
                handle.write("\n")
            os.replace(tmp_name, path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise StoreError(f"unable to write plugins state to {path}: {exc}") from exc
        logger.debug("wrote plugins state %s", path)
        return path

    def read_state(self) -> dict[str, PluginReference]:
        path = self.state_path
        if not path.exists():
            return {}
        try:
            payload: Any = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"unable to read plugins state from {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise StoreError(f"plugins state at {path} is not a mapping")
        return {
            alias: PluginReference.from_mapping(alias, entry)
            for alias, entry in payload.items()
            if isinstance(entry, dict)
        }

    @staticmethod
    def _prune_empty_dirs(top: Path) -> None:
        for directory in sorted(
            (path for path in top.rglob("*") if path.is_dir()),
            key=lambda path: len(path.parts),
            reverse=True,
        ):
            if not any(directory.iterdir()):
                directory.rmdir()
