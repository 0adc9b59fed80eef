"""Tests for the filesystem plugin store."""

from __future__ import annotations

import json
import zipfile
from pathlib import Path

import pytest

from ppm_core.plugin import PluginReference, StoreError
from ppm_core.store import LocalPluginStore


def _ref(alias: str, module: str, version: str) -> PluginReference:
    return PluginReference(alias=alias, module_name=module, version=version)


def _write_zip(path: Path, files: dict[str, str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as bundle:
        for name, content in files.items():
            bundle.writestr(name, content)


def test_layout_paths(tmp_path: Path) -> None:
    store = LocalPluginStore(tmp_path)
    assert store.archive_path("acme/auth", "v1") == tmp_path / "archives" / "acme" / "auth" / "v1.zip"
    assert store.source_dir("acme/auth", "v1") == tmp_path / "sources" / "acme" / "auth" / "v1"
    assert store.state_path == tmp_path / "archives" / "state.json"


def test_clean_archives_keeps_only_referenced(tmp_path: Path) -> None:
    store = LocalPluginStore(tmp_path)
    keep = store.archive_path("acme/auth", "v2")
    stale_version = store.archive_path("acme/auth", "v1")
    stale_module = store.archive_path("acme/gone", "v1")
    for path in (keep, stale_version, stale_module):
        _write_zip(path, {"a.txt": "a"})
    store.write_state({})

    store.clean_archives({"auth": _ref("auth", "acme/auth", "v2")})

    assert keep.is_file()
    assert not stale_version.exists()
    assert not stale_module.exists()
    assert not stale_module.parent.exists()
    assert store.state_path.is_file()


def test_clean_archives_without_storage_is_a_no_op(tmp_path: Path) -> None:
    LocalPluginStore(tmp_path / "empty").clean_archives({})


def test_unzip_strips_shared_top_directory(tmp_path: Path) -> None:
    store = LocalPluginStore(tmp_path)
    _write_zip(
        store.archive_path("acme/auth", "v1"),
        {"auth-v1/.plugin.yml": "type: middleware\n", "auth-v1/pkg/auth.py": "X = 1\n"},
    )

    destination = store.unzip("acme/auth", "v1")

    assert (destination / ".plugin.yml").read_text() == "type: middleware\n"
    assert (destination / "pkg" / "auth.py").is_file()


def test_unzip_replaces_previous_extraction(tmp_path: Path) -> None:
    store = LocalPluginStore(tmp_path)
    stale = store.source_dir("acme/auth", "v1") / "stale.txt"
    stale.parent.mkdir(parents=True)
    stale.write_text("old")
    _write_zip(store.archive_path("acme/auth", "v1"), {"fresh.txt": "new", "other.txt": "x"})

    store.unzip("acme/auth", "v1")

    assert not stale.exists()
    assert (store.source_dir("acme/auth", "v1") / "fresh.txt").read_text() == "new"


def test_unzip_blocks_path_traversal(tmp_path: Path) -> None:
    store = LocalPluginStore(tmp_path)
    _write_zip(store.archive_path("acme/evil", "v1"), {"../../escape.txt": "x", "ok.txt": "y"})

    with pytest.raises(StoreError, match="outside of"):
        store.unzip("acme/evil", "v1")
    assert not (tmp_path / "sources" / "escape.txt").exists()


def test_unzip_missing_archive(tmp_path: Path) -> None:
    with pytest.raises(StoreError, match="archive not found"):
        LocalPluginStore(tmp_path).unzip("acme/none", "v1")


def test_unzip_corrupt_archive(tmp_path: Path) -> None:
    store = LocalPluginStore(tmp_path)
    archive = store.archive_path("acme/bad", "v1")
    archive.parent.mkdir(parents=True)
    archive.write_bytes(b"not a zip")

    with pytest.raises(StoreError, match="unable to unzip"):
        store.unzip("acme/bad", "v1")


def test_reset_all_wipes_archives_and_sources(tmp_path: Path) -> None:
    store = LocalPluginStore(tmp_path)
    _write_zip(store.archive_path("acme/auth", "v1"), {"a.txt": "a"})
    store.unzip("acme/auth", "v1")
    store.write_state({"auth": _ref("auth", "acme/auth", "v1")})

    store.reset_all()
    store.reset_all()

    assert not (tmp_path / "archives").exists()
    assert not (tmp_path / "sources").exists()
    assert store.read_state() == {}


def test_write_state_replaces_previous_state(tmp_path: Path) -> None:
    store = LocalPluginStore(tmp_path)
    store.write_state({"old": _ref("old", "acme/old", "v1")})
    store.write_state({"new": _ref("new", "acme/new", "v2")})

    payload = json.loads(store.state_path.read_text(encoding="utf-8"))
    assert payload == {"new": {"module": "acme/new", "required": False, "version": "v2"}}
    assert store.read_state() == {"new": _ref("new", "acme/new", "v2")}
    assert [p.name for p in store.state_path.parent.iterdir()] == ["state.json"]


def test_read_state_rejects_garbage(tmp_path: Path) -> None:
    store = LocalPluginStore(tmp_path)
    store.state_path.parent.mkdir(parents=True)
    store.state_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(StoreError, match="not a mapping"):
        store.read_state()


@pytest.mark.parametrize(
    ("module", "version"),
    [
        ("a/../../../victim", "v1"),
        ("acme/./auth", "v1"),
        ("acme//auth", "v1"),
        ("acme\\auth", "v1"),
        ("acme/auth", ".."),
        ("acme/auth", "v1/../../x"),
        ("acme/auth", ""),
    ],
)
def test_unsafe_names_are_rejected(tmp_path: Path, module: str, version: str) -> None:
    store = LocalPluginStore(tmp_path / "store")
    with pytest.raises(StoreError):
        store.archive_path(module, version)
    with pytest.raises(StoreError):
        store.source_dir(module, version)


def test_unzip_never_touches_files_outside_the_store(tmp_path: Path) -> None:
    store = LocalPluginStore(tmp_path / "store")
    (tmp_path / "store" / "sources" / "a").mkdir(parents=True)
    outside = tmp_path / "victim" / "v1" / "keep.txt"
    outside.parent.mkdir(parents=True)
    outside.write_text("precious")

    with pytest.raises(StoreError):
        store.unzip("a/../../../victim", "v1")

    assert outside.read_text() == "precious"


def test_clean_archives_rejects_escaping_reference(tmp_path: Path) -> None:
    store = LocalPluginStore(tmp_path / "store")
    _write_zip(store.archive_path("acme/auth", "v1"), {"a.txt": "a"})

    with pytest.raises(StoreError):
        store.clean_archives({"x": _ref("x", "acme/../../elsewhere", "v1")})
    assert store.archive_path("acme/auth", "v1").is_file()
