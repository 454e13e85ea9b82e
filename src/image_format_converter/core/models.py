from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable

DEFAULT_FORMAT_QUALITY = 80
DEFAULT_COMPRESS_QUALITY = 85


@dataclass(frozen=True, slots=True)
class OutputFormatSpec:
    format: str
    quality: int = DEFAULT_FORMAT_QUALITY

    @property
    def label(self) -> str:
        return self.format.upper()


def _default_formats() -> tuple[OutputFormatSpec, ...]:
    return (OutputFormatSpec("avif", DEFAULT_FORMAT_QUALITY),)


@dataclass(frozen=True, slots=True)
class ConverterConfig:
    source_root: Path = Path("src")
    dest_root: Path = Path("dist")
    keep_extension: bool = False
    formats: tuple[OutputFormatSpec, ...] = field(default_factory=_default_formats)
    compress_quality: int = DEFAULT_COMPRESS_QUALITY
    file_concurrency: int = 1

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "source_root", Path(self.source_root))
        object.__setattr__(self, "dest_root", Path(self.dest_root))
        object.__setattr__(self, "formats", _normalize_formats(self.formats))
        object.__setattr__(self, "file_concurrency", max(1, int(self.file_concurrency)))


def _normalize_formats(formats: Iterable[OutputFormatSpec]) -> tuple[OutputFormatSpec, ...]:
    return tuple(OutputFormatSpec(spec.format.strip().lower(), spec.quality) for spec in formats)


class JobKind(str, Enum):
    CONVERT = "convert"
    COMPRESS = "compress"


@dataclass(frozen=True, slots=True)
class JobOutcome:
    source_path: Path
    dest_path: Path | None
    format_label: str
    kind: JobKind
    success: bool
    error: str | None = None
    error_type: str | None = None
    input_bytes: int = 0
    output_bytes: int = 0


class RunState(str, Enum):
    COMPLETED = "completed"
    NO_INPUT_FILES = "no_input_files"


@dataclass(slots=True)
class RunReport:
    state: RunState
    total_files: int
    outcomes: list[JobOutcome] = field(default_factory=list)

    @property
    def total_jobs(self) -> int:
        return len(self.outcomes)

    @property
    def failures(self) -> list[JobOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]

    @property
    def failed_jobs(self) -> int:
        return len(self.failures)

    @property
    def succeeded_jobs(self) -> int:
        return self.total_jobs - self.failed_jobs

    @property
    def input_total_bytes(self) -> int:
        return sum(outcome.input_bytes for outcome in self.outcomes if outcome.success)

    @property
    def output_total_bytes(self) -> int:
        return sum(outcome.output_bytes for outcome in self.outcomes if outcome.success)

    @property
    def bytes_saved(self) -> int:
        return self.input_total_bytes - self.output_total_bytes

    @property
    def compression_rate_percent(self) -> float:
        if self.input_total_bytes <= 0:
            return 0.0
        return (self.bytes_saved / self.input_total_bytes) * 100
