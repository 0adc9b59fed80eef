"""Structural checks shared by the remote and local plugin pipelines."""

from __future__ import annotations

from typing import Iterator, Mapping, TypeVar

from .references import LocalPluginReference, PluginReference
from .violations import ViolationKind, Violations

__all__ = ["MODULE_SEPARATOR", "check_references", "iter_well_formed"]

MODULE_SEPARATOR = "/"

RefT = TypeVar("RefT", PluginReference, LocalPluginReference)


def iter_well_formed(
    references: Mapping[str, RefT] | None,
    violations: Violations,
) -> Iterator[tuple[str, RefT]]:
    """Yield entries that pass the name checks, recording the rest.

    Entries are visited in alias order. A missing name or version is
    reported first and does not stop the other checks. An entry with a
    malformed or duplicated module name is reported and not checked any
    further, but the remaining entries are.
    """

    if not references:
        return

    seen: set[str] = set()
    for alias in sorted(references):
        reference = references[alias]
        module_name = reference.module_name

        if not module_name:
            violations.add(alias, module_name, ViolationKind.MISSING_NAME, "plugin name is missing")

        if isinstance(reference, PluginReference) and not reference.version:
            violations.add(
                alias, module_name, ViolationKind.MISSING_VERSION, "plugin version is missing"
            )

        if module_name.startswith(MODULE_SEPARATOR) or module_name.endswith(MODULE_SEPARATOR):
            violations.add(
                alias,
                module_name,
                ViolationKind.INVALID_NAME_SHAPE,
                f"plugin name should not start or end with a {MODULE_SEPARATOR}",
            )
            continue

        if module_name in seen:
            violations.add(
                alias,
                module_name,
                ViolationKind.DUPLICATE_MODULE,
                f"only one version of a plugin is allowed, there is a duplicate of {module_name}",
            )
            continue

        seen.add(module_name)
        yield alias, reference


def check_references(
    references: Mapping[str, PluginReference] | Mapping[str, LocalPluginReference] | None,
) -> Violations:
    """Run the name/version/uniqueness checks without touching any storage."""

    violations = Violations()
    for _ in iter_well_formed(references, violations):
        pass
    return violations
