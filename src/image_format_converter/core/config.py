from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping

from image_format_converter.core.errors import ConfigError
from image_format_converter.core.models import DEFAULT_FORMAT_QUALITY, ConverterConfig, OutputFormatSpec

# camelCase aliases are accepted alongside the field names
CONFIG_KEYS = {
    "source_root": "source_root",
    "srcBase": "source_root",
    "dest_root": "dest_root",
    "destBase": "dest_root",
    "keep_extension": "keep_extension",
    "includeExtensionName": "keep_extension",
    "formats": "formats",
    "compress_quality": "compress_quality",
    "compressQuality": "compress_quality",
    "file_concurrency": "file_concurrency",
    "fileConcurrency": "file_concurrency",
}
FIELD_TYPES: dict[str, type] = {
    "source_root": str,
    "dest_root": str,
    "keep_extension": bool,
    "compress_quality": int,
    "file_concurrency": int,
}


def parse_format_spec(value: str) -> OutputFormatSpec:
    """Parse ``"webp"`` or ``"webp:75"`` into an :class:`OutputFormatSpec`."""
    name, _, quality = value.partition(":")
    name = name.strip()
    if not name:
        raise ConfigError(f"Missing format name in {value!r}")
    if not quality.strip():
        return OutputFormatSpec(name, DEFAULT_FORMAT_QUALITY)
    try:
        return OutputFormatSpec(name, int(quality))
    except ValueError:
        raise ConfigError(f"Quality must be an integer in {value!r}") from None


def _format_from_mapping(item: Any) -> OutputFormatSpec:
    if isinstance(item, str):
        return parse_format_spec(item)
    if not isinstance(item, Mapping):
        raise ConfigError(f"Invalid format entry: {item!r}")
    name = item.get("format", item.get("type"))
    if not isinstance(name, str):
        raise ConfigError(f"Format entry needs a 'format' (or 'type') name: {item!r}")
    quality = item.get("quality", DEFAULT_FORMAT_QUALITY)
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise ConfigError(f"Format quality must be an integer: {item!r}")
    return OutputFormatSpec(name, quality)


def _check_type(key: str, field_name: str, value: Any) -> Any:
    expected = FIELD_TYPES.get(field_name)
    if expected is None:
        return value
    # bool is an int subclass; only keep_extension accepts it
    if isinstance(value, bool) and expected is not bool:
        raise ConfigError(f"'{key}' must be {expected.__name__}, got {value!r}")
    if not isinstance(value, expected):
        raise ConfigError(f"'{key}' must be {expected.__name__}, got {value!r}")
    if field_name == "file_concurrency" and value < 1:
        raise ConfigError(f"'{key}' must be at least 1, got {value!r}")
    return value


def normalize_options(raw: Mapping[str, Any]) -> dict[str, Any]:
    options: dict[str, Any] = {}
    for key, value in raw.items():
        field_name = CONFIG_KEYS.get(key)
        if field_name is None:
            raise ConfigError(f"Unknown configuration key: {key}")
        options[field_name] = _check_type(key, field_name, value)

    if "formats" in options:
        formats = options["formats"]
        if not isinstance(formats, list):
            raise ConfigError("'formats' must be a list")
        options["formats"] = tuple(_format_from_mapping(item) for item in formats)
    return options


def load_config_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as stream:
            payload = json.load(stream)
    except OSError as error:
        raise ConfigError(f"Cannot read config file {path}: {error}") from error
    except json.JSONDecodeError as error:
        raise ConfigError(f"Invalid JSON in {path}: {error}") from error

    if not isinstance(payload, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return normalize_options(payload)


def build_config(
    file_options: Mapping[str, Any] | None = None,
    formats: Iterable[str] | None = None,
    **overrides: Any,
) -> ConverterConfig:
    """Merge defaults, config-file options and command-line overrides.

    ``None`` overrides are ignored so unset CLI flags fall through.
    """
    options: dict[str, Any] = dict(file_options or {})
    options.update({key: value for key, value in overrides.items() if value is not None})
    if formats:
        options["formats"] = tuple(parse_format_spec(value) for value in formats)
    return ConverterConfig(**options)
