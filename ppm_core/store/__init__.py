"""Local plugin storage and the client contract consumed by the pipeline."""

from .client import ArchiveTransport, PluginClient, StoreClient
from .store import LocalPluginStore

__all__ = [
    "ArchiveTransport",
    "LocalPluginStore",
    "PluginClient",
    "StoreClient",
]
