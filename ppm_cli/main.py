"""ppm CLI: validate plugin configuration and inspect the installed set."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from ppm_core import SettingsResolver, __version__, load_plugin_config
from ppm_core.plugin import (
    PluginError,
    PluginValidationError,
    check_references,
    setup_local_plugins,
)
from ppm_core.store import LocalPluginStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ppm", description="Plugin provisioning manager")
    parser.add_argument("--version", action="version", version=f"ppm v{__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    validate = commands.add_parser("validate", help="Check remote plugin references without any I/O")
    validate.add_argument("--config", required=True, help="Plugin configuration file (TOML)")

    check_local = commands.add_parser("check-local", help="Validate local plugin manifests")
    check_local.add_argument("--config", required=True, help="Plugin configuration file (TOML)")
    check_local.add_argument("--local-root", help="Directory holding local plugin sources")

    state = commands.add_parser("state", help="Show the installed plugin set")
    state.add_argument("--config", help="Plugin configuration file (TOML)")
    state.add_argument("--storage-dir", help="Plugin storage directory")
    state.add_argument("--format", choices=("text", "json"), default="text")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "validate":
            return _run_validate(args)
        if args.command == "check-local":
            return _run_check_local(args)
        return _run_state(args)
    except PluginError as exc:
        print(f"[ppm:{args.command}] {exc}", file=sys.stderr)
        return 1


def _run_validate(args: argparse.Namespace) -> int:
    config = load_plugin_config(args.config)
    violations = check_references(config.remote)
    if violations:
        for violation in violations:
            print(violation)
        return 1
    print(f"ok ({len(config.remote)} remote plugin(s))")
    return 0


def _run_check_local(args: argparse.Namespace) -> int:
    config_path = Path(args.config)
    config = load_plugin_config(config_path)
    settings = SettingsResolver(
        config_path=config_path,
        overrides={"local_root": args.local_root},
    ).resolve()
    try:
        setup_local_plugins(config.local, root=settings.local_root)
    except PluginValidationError as exc:
        for violation in exc.violations:
            print(violation)
        return 1
    print(f"ok ({len(config.local)} local plugin(s))")
    return 0


def _run_state(args: argparse.Namespace) -> int:
    settings = SettingsResolver(
        config_path=Path(args.config) if args.config else None,
        overrides={"storage_dir": args.storage_dir},
    ).resolve()
    installed = LocalPluginStore(settings.storage_dir).read_state()
    if args.format == "json":
        payload = {alias: installed[alias].to_dict() for alias in sorted(installed)}
        print(json.dumps(payload, indent=2, sort_keys=True))
        return 0
    if not installed:
        print("no plugins installed")
        return 0
    for alias in sorted(installed):
        ref = installed[alias]
        marker = " (required)" if ref.required else ""
        print(f"{alias}: {ref.module_name}@{ref.version}{marker}")
    return 0
