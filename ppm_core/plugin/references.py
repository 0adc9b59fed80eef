"""Declarative plugin references handed to the provisioning pipelines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .errors import ConfigError

__all__ = ["PluginReference", "LocalPluginReference"]


def _string_field(alias: str, data: Mapping[str, Any], key: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(f"{alias}: '{key}' must be a string")
    return value.strip()


@dataclass(frozen=True)
class PluginReference:
    """A remote, versioned plugin archive registered under ``alias``."""

    alias: str
    module_name: str
    version: str
    required: bool = False

    @classmethod
    def from_mapping(cls, alias: str, data: Mapping[str, Any]) -> "PluginReference":
        required = data.get("required", False)
        if not isinstance(required, bool):
            raise ConfigError(f"{alias}: 'required' must be a boolean")
        return cls(
            alias=alias,
            module_name=_string_field(alias, data, "module"),
            version=_string_field(alias, data, "version"),
            required=required,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "module": self.module_name,
            "version": self.version,
            "required": self.required,
        }


@dataclass(frozen=True)
class LocalPluginReference:
    """A plugin module already present under the local plugins root."""

    alias: str
    module_name: str

    @classmethod
    def from_mapping(cls, alias: str, data: Mapping[str, Any]) -> "LocalPluginReference":
        return cls(alias=alias, module_name=_string_field(alias, data, "module"))
