"""Plugin-specific error types."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .violations import Violation


class PluginError(Exception):
    """Base type for plugin-related failures."""


class ConfigError(PluginError):
    """Raised when the plugin configuration file cannot be read."""


class ManifestError(PluginError):
    """Raised when a plugin manifest cannot be loaded."""


class StoreError(PluginError):
    """Raised when the local plugin store cannot complete an operation."""


class PluginValidationError(PluginError):
    """Aggregated violations found while validating plugin references."""

    def __init__(self, violations: Sequence["Violation"]) -> None:
        self.violations = tuple(violations)
        count = len(self.violations)
        header = f"{count} plugin error{'s' if count != 1 else ''} occurred"
        lines = "".join(f"\n  * {violation}" for violation in self.violations)
        super().__init__(f"{header}:{lines}")

    def kinds(self) -> tuple[str, ...]:
        return tuple(violation.kind.value for violation in self.violations)


class ConfigurationInvalidError(PluginError):
    """Raised before any I/O when the remote references are malformed."""

    def __init__(self, cause: PluginValidationError) -> None:
        super().__init__(f"invalid configuration: {cause}")
        self.violations = cause.violations


class ProvisioningError(PluginError):
    """Base type for failures of the remote provisioning pipeline."""

    phase = "provision"

    def __init__(self, message: str, *, module_name: str | None = None) -> None:
        super().__init__(message)
        self.module_name = module_name


class ArchiveCleanupError(ProvisioningError):
    phase = "clean"


class DownloadError(ProvisioningError):
    phase = "download"


class IntegrityCheckError(ProvisioningError):
    phase = "check"


class UnpackError(ProvisioningError):
    phase = "unzip"


class StatePersistError(ProvisioningError):
    phase = "write-state"
