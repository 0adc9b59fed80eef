"""Handle plugin manifest parsing and the type/runtime compatibility table."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ManifestError

__all__ = [
    "MANIFEST_FILE_NAME",
    "SOURCES_DIR_NAME",
    "TYPE_MIDDLEWARE",
    "TYPE_PROVIDER",
    "RUNTIME_INTERPRETED",
    "RUNTIME_SANDBOXED",
    "RUNTIME_DEFAULT",
    "ALLOWED_RUNTIMES",
    "Manifest",
    "manifest_path",
    "read_manifest",
]

MANIFEST_FILE_NAME = ".plugin.yml"
SOURCES_DIR_NAME = "src"

TYPE_MIDDLEWARE = "middleware"
TYPE_PROVIDER = "provider"

RUNTIME_INTERPRETED = "interpreted"
RUNTIME_SANDBOXED = "sandboxed-bytecode"
RUNTIME_DEFAULT = ""

# plugin type -> runtimes it may declare
ALLOWED_RUNTIMES: dict[str, frozenset[str]] = {
    TYPE_MIDDLEWARE: frozenset({RUNTIME_INTERPRETED, RUNTIME_SANDBOXED, RUNTIME_DEFAULT}),
    TYPE_PROVIDER: frozenset({RUNTIME_INTERPRETED, RUNTIME_DEFAULT}),
}


@dataclass(frozen=True)
class Manifest:
    """Metadata a plugin module declares about itself."""

    type: str
    runtime: str
    import_path: str
    display_name: str
    summary: str
    test_data: Any = None
    icon_path: str = ""

    def is_interpreted(self) -> bool:
        """Interpreted is the runtime used when none is declared."""

        return self.runtime in (RUNTIME_INTERPRETED, RUNTIME_DEFAULT)

    @classmethod
    def from_mapping(cls, document: dict[str, Any]) -> "Manifest":
        fields: dict[str, str] = {}
        for key, attribute in (
            ("type", "type"),
            ("runtime", "runtime"),
            ("import", "import_path"),
            ("displayName", "display_name"),
            ("summary", "summary"),
            ("iconPath", "icon_path"),
        ):
            raw_value = document.get(key)
            if raw_value is None:
                fields[attribute] = ""
                continue
            if not isinstance(raw_value, str):
                raise ManifestError(f"'{key}' must be a string")
            fields[attribute] = raw_value.strip()
        return cls(test_data=document.get("testData"), **fields)


def manifest_path(root: Path | str, module_name: str) -> Path:
    return Path(root) / SOURCES_DIR_NAME / Path(*module_name.split("/")) / MANIFEST_FILE_NAME


def read_manifest(root: Path | str, module_name: str) -> Manifest:
    """Load the manifest of ``module_name`` from the local plugins root."""

    path = manifest_path(root, module_name)
    try:
        with path.open("r", encoding="utf-8") as handle:
            document = yaml.safe_load(handle)
    except OSError as exc:
        raise ManifestError(f"{module_name}: unable to read manifest at {path}") from exc
    except yaml.YAMLError as exc:
        raise ManifestError(f"{module_name}: malformed manifest at {path}") from exc

    if not isinstance(document, dict):
        raise ManifestError(f"{module_name}: manifest at {path} is not a mapping")
    try:
        return Manifest.from_mapping(document)
    except ManifestError as exc:
        raise ManifestError(f"{module_name}: {exc}") from exc
