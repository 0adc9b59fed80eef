"""Tests for plugin configuration loading and settings resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from ppm_core import SettingsResolver, UserDirs, load_plugin_config
from ppm_core.plugin import ConfigError, LocalPluginReference, PluginReference

CONFIG = """\
[ppm]
local_root = "./my-plugins"

[plugins.remote.auth]
module = "github.com/acme/auth"
version = "v1.2.0"
required = true

[plugins.remote.rate]
module = "github.com/acme/rate"

[plugins.local.demo]
module = "example.com/demo"
"""


def test_load_plugin_config_builds_references(tmp_path: Path) -> None:
    path = tmp_path / "plugins.toml"
    path.write_text(CONFIG, encoding="utf-8")

    config = load_plugin_config(path)

    assert config.remote == {
        "auth": PluginReference("auth", "github.com/acme/auth", "v1.2.0", required=True),
        "rate": PluginReference("rate", "github.com/acme/rate", "", required=False),
    }
    assert config.local == {"demo": LocalPluginReference("demo", "example.com/demo")}


def test_empty_config_has_no_plugins(tmp_path: Path) -> None:
    path = tmp_path / "plugins.toml"
    path.write_text("", encoding="utf-8")
    config = load_plugin_config(path)
    assert config.remote == {}
    assert config.local == {}


@pytest.mark.parametrize(
    "text",
    [
        "plugins = 1\n",
        "[plugins]\nremote = 'x'\n",
        "[plugins.remote]\nauth = 'x'\n",
        "[plugins.remote.auth]\nmodule = 1\n",
        "[plugins.remote.auth]\nmodule = 'a'\nrequired = 'yes'\n",
        "[plugins.remote.auth\n",
    ],
)
def test_malformed_config_raises(tmp_path: Path, text: str) -> None:
    path = tmp_path / "plugins.toml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_plugin_config(path)


def test_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="unable to read plugin configuration"):
        load_plugin_config(tmp_path / "absent.toml")


def test_settings_precedence(tmp_path: Path) -> None:
    user_config_dir = tmp_path / "user-config"
    user_config_dir.mkdir()
    (user_config_dir / "config.toml").write_text(
        '[ppm]\nstorage_dir = "/from/user"\nlocal_root = "/user/local"\n', encoding="utf-8"
    )
    project = tmp_path / "plugins.toml"
    project.write_text(CONFIG, encoding="utf-8")
    user_dirs = UserDirs(config_dir_override=user_config_dir, data_dir_override=tmp_path / "data")

    resolver = SettingsResolver(config_path=project, user_dirs=user_dirs, env={})
    assert resolver.resolve_setting("storage_dir") == "/from/user"
    assert resolver.resolve_setting("local_root") == "./my-plugins"

    env_resolver = SettingsResolver(
        config_path=project,
        user_dirs=user_dirs,
        env={"PPM_LOCAL_ROOT": "/from/env"},
    )
    assert env_resolver.resolve_setting("local_root") == "/from/env"

    override_resolver = SettingsResolver(
        config_path=project,
        user_dirs=user_dirs,
        env={"PPM_LOCAL_ROOT": "/from/env"},
        overrides={"local_root": "/from/cli"},
    )
    assert override_resolver.resolve().local_root == Path("/from/cli")


def test_settings_defaults(tmp_path: Path) -> None:
    user_dirs = UserDirs(
        config_dir_override=tmp_path / "no-config",
        data_dir_override=tmp_path / "data",
    )
    settings = SettingsResolver(user_dirs=user_dirs, env={}, overrides={"storage_dir": None}).resolve()

    assert settings.storage_dir == tmp_path / "data" / "plugins-storage"
    assert settings.local_root == Path("plugins-local")
