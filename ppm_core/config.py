"""Load plugin reference maps from a TOML configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, TypeVar

import tomllib

from .plugin.errors import ConfigError
from .plugin.references import LocalPluginReference, PluginReference

__all__ = ["PluginConfig", "load_plugin_config", "parse_plugin_config"]

RefT = TypeVar("RefT")


@dataclass(frozen=True)
class PluginConfig:
    remote: dict[str, PluginReference] = field(default_factory=dict)
    local: dict[str, LocalPluginReference] = field(default_factory=dict)


def _section(
    table: dict[str, Any],
    name: str,
    build: Callable[[str, dict[str, Any]], RefT],
) -> dict[str, RefT]:
    raw = table.get(name, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[plugins.{name}] must be a table")
    section: dict[str, RefT] = {}
    for alias, entry in raw.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"[plugins.{name}.{alias}] must be a table")
        section[alias] = build(alias, entry)
    return section


def parse_plugin_config(document: dict[str, Any]) -> PluginConfig:
    plugins = document.get("plugins", {})
    if not isinstance(plugins, dict):
        raise ConfigError("[plugins] must be a table")
    return PluginConfig(
        remote=_section(plugins, "remote", PluginReference.from_mapping),
        local=_section(plugins, "local", LocalPluginReference.from_mapping),
    )


def load_plugin_config(path: Path | str) -> PluginConfig:
    """Read ``[plugins.remote.*]`` and ``[plugins.local.*]`` tables."""

    path = Path(path)
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"unable to read plugin configuration at {path}") from exc
    return parse_plugin_config(document)
