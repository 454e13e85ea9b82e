from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from image_format_converter.core.discovery import SUPPORTED_EXTENSIONS
from image_format_converter.core.errors import UnsupportedExtension


@dataclass(frozen=True, slots=True)
class ResolvedPaths:
    """Destination layout for one source image.

    ``subdir`` is the directory part relative to the source root, with a
    trailing ``/`` (or empty for files directly under the root). ``extension``
    keeps the case it had in the source file name.
    """

    dest_root: Path
    subdir: str
    stem: str
    extension: str
    keep_extension: bool

    @property
    def base_name(self) -> str:
        if self.keep_extension:
            return f"{self.stem}.{self.extension}"
        return self.stem

    @property
    def dest_dir(self) -> Path:
        if not self.subdir:
            return self.dest_root
        return self.dest_root / self.subdir

    def output_path(self, format_id: str) -> Path:
        return self.dest_dir / f"{self.base_name}.{format_id}"

    def compress_path(self) -> Path:
        # compression keeps the container, so the name never doubles the extension
        return self.dest_dir / f"{self.stem}.{self.extension}"


def split_extension(name: str) -> tuple[str, str]:
    stem, dot, extension = name.rpartition(".")
    if not dot or not stem or extension.lower() not in SUPPORTED_EXTENSIONS:
        raise UnsupportedExtension(name)
    return stem, extension


def relative_subdir(source_root: Path, src_path: Path) -> str:
    try:
        relative = src_path.parent.relative_to(source_root)
    except ValueError:
        # outside the source root: flatten into the destination root
        return ""
    if relative == Path("."):
        return ""
    return relative.as_posix() + "/"


def resolve_paths(source_root: Path | str, dest_root: Path | str, src_path: Path | str, keep_extension: bool) -> ResolvedPaths:
    source_root = Path(source_root)
    src_path = Path(src_path)
    stem, extension = split_extension(src_path.name)
    return ResolvedPaths(
        dest_root=Path(dest_root),
        subdir=relative_subdir(source_root, src_path),
        stem=stem,
        extension=extension,
        keep_extension=keep_extension,
    )
