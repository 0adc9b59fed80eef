"""Validate plugin modules that live on the local filesystem."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Mapping

from .errors import ManifestError
from .manifest import ALLOWED_RUNTIMES, Manifest, read_manifest
from .references import LocalPluginReference
from .validation import iter_well_formed
from .violations import ViolationKind, Violations

__all__ = ["DEFAULT_LOCAL_ROOT", "check_local_manifest", "setup_local_plugins"]

DEFAULT_LOCAL_ROOT = Path("./plugins-local")

logger = logging.getLogger(__name__)

ManifestReader = Callable[[Path, str], Manifest]


def setup_local_plugins(
    plugins: Mapping[str, LocalPluginReference] | None,
    *,
    root: Path | str = DEFAULT_LOCAL_ROOT,
    reader: ManifestReader = read_manifest,
) -> None:
    """Check every local plugin and raise one error listing all problems.

    Nothing is written: a clean run returns ``None``.
    """

    if plugins is None:
        return

    root = Path(root)
    violations = Violations()
    for alias, reference in iter_well_formed(plugins, violations):
        logger.debug("checking local plugin %s: %s", alias, reference.module_name)
        try:
            manifest = reader(root, reference.module_name)
        except ManifestError as exc:
            violations.add(alias, reference.module_name, ViolationKind.MANIFEST_UNREADABLE, str(exc))
            continue
        violations.extend(check_local_manifest(alias, reference.module_name, manifest))

    violations.raise_if_any()


def check_local_manifest(alias: str, module_name: str, manifest: Manifest) -> Violations:
    violations = Violations()

    allowed = ALLOWED_RUNTIMES.get(manifest.type)
    if allowed is None:
        violations.add(
            alias,
            module_name,
            ViolationKind.UNSUPPORTED_TYPE,
            f"{module_name}: unsupported type {manifest.type!r}",
        )
    elif manifest.runtime not in allowed:
        violations.add(
            alias,
            module_name,
            ViolationKind.UNSUPPORTED_RUNTIME,
            f"{module_name}: unsupported runtime {manifest.runtime!r} for a {manifest.type}",
        )

    if manifest.is_interpreted():
        if not manifest.import_path:
            violations.add(
                alias, module_name, ViolationKind.MISSING_IMPORT, f"{module_name}: missing import"
            )
        if not manifest.import_path.startswith(module_name):
            violations.add(
                alias,
                module_name,
                ViolationKind.IMPORT_MISMATCH,
                f"the import {manifest.import_path!r} must be related to the module name {module_name!r}",
            )

    if not manifest.display_name:
        violations.add(
            alias, module_name, ViolationKind.MISSING_DISPLAY_NAME, f"{module_name}: missing displayName"
        )

    if not manifest.summary:
        violations.add(
            alias, module_name, ViolationKind.MISSING_SUMMARY, f"{module_name}: missing summary"
        )

    if manifest.test_data is None:
        violations.add(
            alias, module_name, ViolationKind.MISSING_TEST_DATA, f"{module_name}: missing testData"
        )

    return violations
