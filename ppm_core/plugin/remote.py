"""Provision remote plugin archives and record the installed set."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Mapping

from .errors import (
    ArchiveCleanupError,
    ConfigurationInvalidError,
    DownloadError,
    IntegrityCheckError,
    PluginValidationError,
    ProvisioningError,
    StatePersistError,
    UnpackError,
)
from .references import PluginReference
from .validation import check_references

if TYPE_CHECKING:
    from ppm_core.store.client import PluginClient

__all__ = ["setup_remote_plugins", "reset_quietly"]

logger = logging.getLogger(__name__)


def reset_quietly(client: "PluginClient") -> None:
    """Wipe the plugin store, logging instead of raising when that fails."""

    try:
        client.reset_all()
    except Exception as exc:
        logger.warning("unable to reset plugin store: %s", exc)


def setup_remote_plugins(
    client: "PluginClient",
    plugins: Mapping[str, PluginReference] | None,
    *,
    cancel: threading.Event | None = None,
) -> dict[str, PluginReference]:
    """Download, verify and unpack every plugin, then persist the survivors.

    Optional plugins that fail are dropped from the returned mapping; a
    failing required plugin aborts the run. ``plugins`` is not modified.

    Every failure wipes the whole store, including sources unpacked for
    aliases processed earlier in the run. Those aliases stay in the
    returned mapping and the persisted state, so callers that need their
    sources on disk must re-run provisioning.
    """

    try:
        check_references(plugins).raise_if_any()
    except PluginValidationError as exc:
        raise ConfigurationInvalidError(exc) from exc

    references = dict(plugins or {})

    try:
        client.clean_archives(references)
    except Exception as exc:
        raise ArchiveCleanupError(f"unable to clean archives: {exc}") from exc

    unavailable: list[str] = []
    for alias in sorted(references):
        reference = references[alias]
        logger.debug(
            "loading plugin %s: %s@%s", alias, reference.module_name, reference.version
        )
        try:
            _provision(client, reference, cancel)
        except ProvisioningError as exc:
            reset_quietly(client)
            if reference.required:
                raise
            logger.warning("skipping optional plugin %s: %s", reference.module_name, exc)
            unavailable.append(alias)

    for alias in unavailable:
        del references[alias]

    try:
        client.write_state(references)
    except Exception as exc:
        reset_quietly(client)
        raise StatePersistError(f"unable to write plugins state: {exc}") from exc

    logger.info("installed %d plugin(s), skipped %d", len(references), len(unavailable))
    return references


def _provision(
    client: "PluginClient",
    reference: PluginReference,
    cancel: threading.Event | None,
) -> None:
    module_name, version = reference.module_name, reference.version

    try:
        archive_hash = client.download(module_name, version, cancel=cancel)
    except Exception as exc:
        raise DownloadError(
            f"unable to download plugin {module_name}: {exc}", module_name=module_name
        ) from exc

    try:
        client.check(module_name, version, archive_hash, cancel=cancel)
    except Exception as exc:
        raise IntegrityCheckError(
            f"unable to check archive integrity of the plugin {module_name}: {exc}",
            module_name=module_name,
        ) from exc

    try:
        client.unzip(module_name, version)
    except Exception as exc:
        raise UnpackError(
            f"unable to unzip archive of the plugin {module_name}: {exc}",
            module_name=module_name,
        ) from exc
