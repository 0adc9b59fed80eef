"""Core pieces of the plugin provisioning manager."""

from .config import PluginConfig, load_plugin_config
from .paths import UserDirs
from .settings import Settings, SettingsResolver

__version__ = "0.1.0"

__all__ = [
    "PluginConfig",
    "load_plugin_config",
    "Settings",
    "SettingsResolver",
    "UserDirs",
]
