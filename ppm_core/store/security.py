"""Keep every path the store touches inside its storage root."""

from __future__ import annotations

from pathlib import Path

from ppm_core.plugin.errors import StoreError

_FORBIDDEN_SEGMENTS = ("", ".", "..")


def path_segments(label: str, value: str) -> tuple[str, ...]:
    """Split a module name or version into segments safe to join on disk."""

    if "\\" in value:
        raise StoreError(f"{label} {value!r} must not contain a backslash")
    segments = tuple(value.split("/"))
    if any(segment in _FORBIDDEN_SEGMENTS for segment in segments):
        raise StoreError(f"{label} {value!r} has an empty, '.' or '..' segment")
    return segments


def resolve_inside(base_dir: Path, relative_path: str) -> Path:
    """Resolve ``relative_path`` under ``base_dir``, refusing any escape."""

    base = base_dir.resolve()
    candidate = (base / relative_path).resolve()
    if candidate != base and base not in candidate.parents:
        raise StoreError(f"{relative_path!r} resolves outside of {base}")
    return candidate


def common_top_dir(names: list[str]) -> str | None:
    """Return the single top-level directory every member lives under."""

    tops: set[str] = set()
    for name in names:
        head, sep, _ = name.lstrip("/").partition("/")
        if not sep:
            return None
        tops.add(head)
        if len(tops) > 1:
            return None
    return next(iter(tops), None)
