from __future__ import annotations

from pathlib import Path
from typing import Iterable

SUPPORTED_EXTENSIONS = ("jpg", "jpeg", "png")
_SUFFIXES = {f".{extension}" for extension in SUPPORTED_EXTENSIONS}


def filter_supported_images(paths: Iterable[Path]) -> list[Path]:
    return [path for path in paths if path.suffix.lower() in _SUFFIXES]


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def find_source_images(source_root: Path, exclude: Path | None = None) -> list[Path]:
    """Return every ``{source_root}/**/*.{jpg,jpeg,png}`` file, sorted.

    Extensions match case-insensitively and dot-prefixed files or directories
    are skipped. ``exclude`` (the destination root) is only honoured when it
    is the source root or lives inside it; a destination that contains the
    source tree excludes nothing.
    """
    if not source_root.is_dir():
        return []

    resolved_root = source_root.resolve()
    excluded = None
    if exclude is not None and exclude.resolve().is_relative_to(resolved_root):
        excluded = exclude.resolve()

    found: list[Path] = []
    for path in filter_supported_images(source_root.rglob("*")):
        if _is_hidden(path, source_root) or not path.is_file():
            continue
        if excluded is not None and path.resolve().is_relative_to(excluded):
            continue
        found.append(path)
    return sorted(found)
