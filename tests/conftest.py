from __future__ import annotations

from pathlib import Path
from threading import Lock

import pytest
from PIL import Image

from image_format_converter.core.errors import EncodeError


class RecordingEncoder:
    """Writes placeholder bytes instead of encoding; fails on request."""

    def __init__(self, fail_formats: set[str] | None = None, fail_reencode: bool = False) -> None:
        self.fail_formats = fail_formats or set()
        self.fail_reencode = fail_reencode
        self.calls: list[tuple[str, Path, Path]] = []
        self._lock = Lock()

    def _record(self, kind: str, source: Path, dest: Path) -> None:
        with self._lock:
            self.calls.append((kind, source, dest))

    def encode(self, source: Path, dest: Path, format_id: str, quality: int) -> int:
        self._record(format_id, source, dest)
        if format_id in self.fail_formats:
            raise EncodeError(f"cannot encode {format_id} at quality {quality}")
        dest.write_bytes(b"x" * 10)
        return 10

    def reencode(self, source: Path, dest: Path, quality: int) -> int:
        self._record("reencode", source, dest)
        if self.fail_reencode:
            raise EncodeError("re-encode failed")
        dest.write_bytes(b"y" * 5)
        return 5


@pytest.fixture
def recording_encoder():
    return RecordingEncoder


@pytest.fixture
def make_image():
    def _make(path: Path, size: tuple[int, int] = (32, 24), mode: str = "RGB", image_format: str | None = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        color = (200, 40, 90, 128) if mode == "RGBA" else (200, 40, 90)
        Image.new(mode, size, color).save(path, format=image_format)
        return path

    return _make


@pytest.fixture
def source_tree(tmp_path, make_image):
    root = tmp_path / "src"
    make_image(root / "top.jpg", image_format="JPEG")
    make_image(root / "a" / "b.png", mode="RGBA", image_format="PNG")
    make_image(root / "a" / "deep" / "C.JPEG", image_format="JPEG")
    (root / "notes.txt").parent.mkdir(parents=True, exist_ok=True)
    (root / "notes.txt").write_text("not an image", encoding="utf-8")
    return root
