"""Ordered accumulator for plugin validation violations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from .errors import PluginValidationError

__all__ = ["ViolationKind", "Violation", "Violations"]


class ViolationKind(Enum):
    """Every way a plugin reference or manifest can be rejected."""

    MISSING_NAME = "missing-name"
    MISSING_VERSION = "missing-version"
    INVALID_NAME_SHAPE = "invalid-name-shape"
    DUPLICATE_MODULE = "duplicate-module"
    MANIFEST_UNREADABLE = "manifest-unreadable"
    UNSUPPORTED_TYPE = "unsupported-type"
    UNSUPPORTED_RUNTIME = "unsupported-runtime"
    MISSING_IMPORT = "missing-import"
    IMPORT_MISMATCH = "import-mismatch"
    MISSING_DISPLAY_NAME = "missing-display-name"
    MISSING_SUMMARY = "missing-summary"
    MISSING_TEST_DATA = "missing-test-data"


@dataclass(frozen=True)
class Violation:
    alias: str
    module_name: str
    kind: ViolationKind
    message: str

    def __str__(self) -> str:
        return f"{self.alias}: {self.message}"


class Violations:
    """Collect violations during one validation pass and report them once."""

    def __init__(self, items: Iterable[Violation] = ()) -> None:
        self._items: list[Violation] = list(items)

    def add(
        self,
        alias: str,
        module_name: str,
        kind: ViolationKind,
        message: str,
    ) -> None:
        self._items.append(Violation(alias, module_name, kind, message))

    def extend(self, other: "Violations") -> None:
        self._items.extend(other)

    def of_kind(self, kind: ViolationKind) -> tuple[Violation, ...]:
        return tuple(item for item in self._items if item.kind is kind)

    def __iter__(self) -> Iterator[Violation]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def raise_if_any(self) -> None:
        """Raise a single aggregated error when anything was collected."""

        if self._items:
            raise PluginValidationError(self._items)
