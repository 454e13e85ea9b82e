from __future__ import annotations

import logging
from contextlib import suppress
from pathlib import Path
from typing import Any, Protocol

from PIL import Image

from image_format_converter.core.errors import EncodeError

logger = logging.getLogger(__name__)

PILLOW_FORMATS = {
    "avif": "AVIF",
    "webp": "WEBP",
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
}
ALPHA_FORMATS = {"AVIF", "WEBP", "PNG"}

_ENCODER_FAILURES = (OSError, ValueError, KeyError, SyntaxError, Image.DecompressionBombError)


class Encoder(Protocol):
    def encode(self, source: Path, dest: Path, format_id: str, quality: int) -> int:
        ...

    def reencode(self, source: Path, dest: Path, quality: int) -> int:
        ...


def pillow_format(format_id: str) -> str:
    try:
        return PILLOW_FORMATS[format_id.lower()]
    except KeyError:
        raise EncodeError(f"Unsupported output format: {format_id}") from None


def check_quality(quality: int) -> int:
    if isinstance(quality, bool) or not isinstance(quality, int) or not 0 <= quality <= 100:
        raise EncodeError(f"Invalid quality setting: {quality!r} (expected an integer 0-100)")
    return quality


class PillowEncoder:
    def encode(self, source: Path, dest: Path, format_id: str, quality: int) -> int:
        target = pillow_format(format_id)
        check_quality(quality)
        return self._save(source, dest, target, quality)

    def reencode(self, source: Path, dest: Path, quality: int) -> int:
        target = pillow_format(source.suffix.lstrip("."))
        check_quality(quality)
        return self._save(source, dest, target, quality)

    def _save(self, source: Path, dest: Path, target: str, quality: int) -> int:
        try:
            with Image.open(source) as image:
                prepared = self._prepare(image, target, quality)
                prepared.save(dest, format=target, **self._save_kwargs(target, quality))
        except _ENCODER_FAILURES as error:
            with suppress(OSError):
                dest.unlink(missing_ok=True)
            raise EncodeError(f"{type(error).__name__}: {error}") from error

        logger.debug("Encoded %s -> %s (%s, quality %d)", source, dest, target, quality)
        return dest.stat().st_size

    def _prepare(self, image: Image.Image, target: str, quality: int) -> Image.Image:
        if image.mode == "P":
            image = image.convert("RGBA" if "transparency" in image.info else "RGB")

        if target == "PNG":
            # PNG has no quality knob; quality picks the palette size instead
            colors = max(16, int(256 * quality / 100))
            return quantize(image, min(colors, 256))

        if target not in ALPHA_FORMATS and image.mode not in ("RGB", "L"):
            return image.convert("RGB")
        if image.mode not in ("RGB", "RGBA", "L"):
            return image.convert("RGBA" if "A" in image.getbands() else "RGB")
        return image

    def _save_kwargs(self, target: str, quality: int) -> dict[str, Any]:
        if target == "JPEG":
            return {"quality": quality, "optimize": True, "progressive": True}
        if target == "WEBP":
            return {"quality": quality, "method": 6}
        if target == "PNG":
            return {"optimize": True, "compress_level": 9}
        return {"quality": quality}


def quantize(image: Image.Image, colors: int) -> Image.Image:
    if image.mode in ("RGBA", "LA"):
        return image.convert("RGBA").quantize(colors=colors, method=Image.Quantize.FASTOCTREE)
    return image.convert("RGB").quantize(colors=colors, method=Image.Quantize.MEDIANCUT)
