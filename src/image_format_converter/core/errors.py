from __future__ import annotations


class ConverterError(Exception):
    """Base class for failures the converter records instead of raising."""


class UnsupportedExtension(ConverterError):
    def __init__(self, path: object) -> None:
        super().__init__(f"Unsupported image extension: {path}")
        self.path = path


class FilesystemError(ConverterError):
    pass


class EncodeError(ConverterError):
    pass


class ConfigError(ConverterError):
    pass
