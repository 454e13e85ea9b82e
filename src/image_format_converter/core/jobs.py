from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from image_format_converter.core.encoder import Encoder
from image_format_converter.core.errors import ConverterError
from image_format_converter.core.models import ConverterConfig, JobKind, JobOutcome, OutputFormatSpec
from image_format_converter.core.paths import ResolvedPaths

logger = logging.getLogger(__name__)


def _file_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError:
        return 0


@dataclass(frozen=True, slots=True)
class ConversionJob:
    source: Path
    dest: Path
    spec: OutputFormatSpec

    @property
    def label(self) -> str:
        return self.spec.label

    def run(self, encoder: Encoder) -> JobOutcome:
        try:
            written = encoder.encode(self.source, self.dest, self.spec.format, self.spec.quality)
        except ConverterError as error:
            logger.debug("Conversion of %s to %s failed: %s", self.source, self.label, error)
            return failed_outcome(self.source, self.dest, self.label, JobKind.CONVERT, error)
        return JobOutcome(
            source_path=self.source,
            dest_path=self.dest,
            format_label=self.label,
            kind=JobKind.CONVERT,
            success=True,
            input_bytes=_file_size(self.source),
            output_bytes=written,
        )


@dataclass(frozen=True, slots=True)
class CompressionJob:
    source: Path
    dest: Path
    quality: int

    @property
    def label(self) -> str:
        return self.source.suffix.lstrip(".").upper()

    def run(self, encoder: Encoder) -> JobOutcome:
        try:
            written = encoder.reencode(self.source, self.dest, self.quality)
        except ConverterError as error:
            logger.debug("Compression of %s failed: %s", self.source, error)
            return failed_outcome(self.source, self.dest, self.label, JobKind.COMPRESS, error)
        return JobOutcome(
            source_path=self.source,
            dest_path=self.dest,
            format_label=self.label,
            kind=JobKind.COMPRESS,
            success=True,
            input_bytes=_file_size(self.source),
            output_bytes=written,
        )


Job = ConversionJob | CompressionJob


def build_jobs(source: Path, paths: ResolvedPaths, config: ConverterConfig) -> list[Job]:
    jobs: list[Job] = [ConversionJob(source, paths.output_path(spec.format), spec) for spec in config.formats]
    jobs.append(CompressionJob(source, paths.compress_path(), config.compress_quality))
    return jobs


def failed_outcome(
    source: Path,
    dest: Path | None,
    label: str,
    kind: JobKind,
    error: ConverterError,
) -> JobOutcome:
    return JobOutcome(
        source_path=source,
        dest_path=dest,
        format_label=label,
        kind=kind,
        success=False,
        error=str(error),
        error_type=type(error).__name__,
    )


def planned_failures(source: Path, config: ConverterConfig, error: ConverterError, paths: ResolvedPaths | None = None) -> list[JobOutcome]:
    """Fail every job planned for ``source`` without running any of them."""
    outcomes = [
        failed_outcome(
            source,
            paths.output_path(spec.format) if paths else None,
            spec.label,
            JobKind.CONVERT,
            error,
        )
        for spec in config.formats
    ]
    outcomes.append(
        failed_outcome(
            source,
            paths.compress_path() if paths else None,
            source.suffix.lstrip(".").upper(),
            JobKind.COMPRESS,
            error,
        )
    )
    return outcomes
