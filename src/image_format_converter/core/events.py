from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from image_format_converter.core.models import JobKind, JobOutcome


class EventKind(str, Enum):
    FILE_STARTED = "file_started"
    DIRECTORY_CREATED = "directory_created"
    DIRECTORY_FAILED = "directory_failed"
    CONVERTED = "converted"
    COMPRESSED = "compressed"
    JOB_FAILED = "job_failed"
    NO_INPUT_FILES = "no_input_files"


@dataclass(frozen=True, slots=True)
class ConverterEvent:
    kind: EventKind
    source: Path | None = None
    dest: Path | None = None
    format_label: str | None = None
    detail: str | None = None
    quality: int | None = None


EventCallback = Callable[[ConverterEvent], None]
ProgressCallback = Callable[[int, int], None]


def event_for_outcome(outcome: JobOutcome, quality: int | None = None) -> ConverterEvent:
    if not outcome.success:
        return ConverterEvent(
            kind=EventKind.JOB_FAILED,
            source=outcome.source_path,
            dest=outcome.dest_path,
            format_label=outcome.format_label,
            detail=outcome.error,
        )
    kind = EventKind.COMPRESSED if outcome.kind is JobKind.COMPRESS else EventKind.CONVERTED
    return ConverterEvent(
        kind=kind,
        source=outcome.source_path,
        dest=outcome.dest_path,
        format_label=outcome.format_label,
        quality=quality,
    )
