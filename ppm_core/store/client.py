"""Collaborator contracts used by the remote provisioning pipeline."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Mapping, Protocol, runtime_checkable

from ppm_core.plugin.references import PluginReference

from .store import LocalPluginStore

__all__ = ["PluginClient", "ArchiveTransport", "StoreClient"]


@runtime_checkable
class PluginClient(Protocol):
    """Everything the pipeline needs from the archive store and transport.

    Each method raises on failure.
    """

    def clean_archives(self, references: Mapping[str, PluginReference]) -> None: ...

    def download(
        self,
        module_name: str,
        version: str,
        *,
        cancel: threading.Event | None = None,
    ) -> str: ...

    def check(
        self,
        module_name: str,
        version: str,
        expected_hash: str,
        *,
        cancel: threading.Event | None = None,
    ) -> None: ...

    def unzip(self, module_name: str, version: str) -> None: ...

    def reset_all(self) -> None: ...

    def write_state(self, references: Mapping[str, PluginReference]) -> None: ...


class ArchiveTransport(Protocol):
    """Fetches archives and vouches for their content hash."""

    def download(
        self,
        module_name: str,
        version: str,
        destination: Path,
        *,
        cancel: threading.Event | None = None,
    ) -> str: ...

    def check(
        self,
        module_name: str,
        version: str,
        archive: Path,
        expected_hash: str,
        *,
        cancel: threading.Event | None = None,
    ) -> None: ...


class StoreClient:
    """Bind an external transport to a local plugin store."""

    def __init__(self, store: LocalPluginStore, transport: ArchiveTransport) -> None:
        self.store = store
        self.transport = transport

    def clean_archives(self, references: Mapping[str, PluginReference]) -> None:
        self.store.clean_archives(references)

    def download(
        self,
        module_name: str,
        version: str,
        *,
        cancel: threading.Event | None = None,
    ) -> str:
        destination = self.store.archive_path(module_name, version)
        destination.parent.mkdir(parents=True, exist_ok=True)
        return self.transport.download(module_name, version, destination, cancel=cancel)

    def check(
        self,
        module_name: str,
        version: str,
        expected_hash: str,
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        self.transport.check(
            module_name,
            version,
            self.store.archive_path(module_name, version),
            expected_hash,
            cancel=cancel,
        )

    def unzip(self, module_name: str, version: str) -> None:
        self.store.unzip(module_name, version)

    def reset_all(self) -> None:
        self.store.reset_all()

    def write_state(self, references: Mapping[str, PluginReference]) -> None:
        self.store.write_state(references)
