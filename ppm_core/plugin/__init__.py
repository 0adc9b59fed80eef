"""Plugin reference validation and provisioning."""

from .errors import (
    ArchiveCleanupError,
    ConfigError,
    ConfigurationInvalidError,
    DownloadError,
    IntegrityCheckError,
    ManifestError,
    PluginError,
    PluginValidationError,
    ProvisioningError,
    StatePersistError,
    StoreError,
    UnpackError,
)
from .local import DEFAULT_LOCAL_ROOT, setup_local_plugins
from .manifest import Manifest, read_manifest
from .references import LocalPluginReference, PluginReference
from .remote import setup_remote_plugins
from .validation import check_references
from .violations import Violation, ViolationKind, Violations

__all__ = [
    "DEFAULT_LOCAL_ROOT",
    "LocalPluginReference",
    "Manifest",
    "PluginReference",
    "Violation",
    "ViolationKind",
    "Violations",
    "check_references",
    "read_manifest",
    "setup_local_plugins",
    "setup_remote_plugins",
    "PluginError",
    "ConfigError",
    "ManifestError",
    "StoreError",
    "PluginValidationError",
    "ConfigurationInvalidError",
    "ProvisioningError",
    "ArchiveCleanupError",
    "DownloadError",
    "IntegrityCheckError",
    "UnpackError",
    "StatePersistError",
]
