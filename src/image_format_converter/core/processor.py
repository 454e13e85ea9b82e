from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from image_format_converter.core.directories import DirectoryMaterializer
from image_format_converter.core.encoder import Encoder
from image_format_converter.core.errors import FilesystemError, UnsupportedExtension
from image_format_converter.core.events import ConverterEvent, EventCallback, EventKind, event_for_outcome
from image_format_converter.core.jobs import CompressionJob, Job, build_jobs, planned_failures
from image_format_converter.core.models import ConverterConfig, JobOutcome
from image_format_converter.core.paths import resolve_paths

logger = logging.getLogger(__name__)


class FileProcessor:
    """Runs every conversion job and the compression job for one source file.

    The destination directory is materialised first; the jobs then run
    concurrently in worker threads and are all awaited, so one failing job
    never cancels its siblings.
    """

    def __init__(
        self,
        config: ConverterConfig,
        encoder: Encoder,
        materializer: DirectoryMaterializer | None = None,
        on_event: EventCallback | None = None,
    ) -> None:
        self.config = config
        self.encoder = encoder
        self.materializer = materializer or DirectoryMaterializer()
        self.on_event = on_event

    async def process(self, source: Path) -> list[JobOutcome]:
        config = self.config
        try:
            paths = resolve_paths(config.source_root, config.dest_root, source, config.keep_extension)
        except UnsupportedExtension as error:
            logger.warning("Skipping %s: %s", source, error)
            outcomes = planned_failures(source, config, error)
            self._emit_outcomes(outcomes)
            return outcomes

        try:
            created = await asyncio.to_thread(self.materializer.ensure, paths.dest_dir)
        except FilesystemError as error:
            self._emit(ConverterEvent(EventKind.DIRECTORY_FAILED, source=source, dest=paths.dest_dir, detail=str(error)))
            outcomes = planned_failures(source, config, error, paths)
            self._emit_outcomes(outcomes)
            return outcomes
        if created:
            self._emit(ConverterEvent(EventKind.DIRECTORY_CREATED, dest=paths.dest_dir))

        jobs = build_jobs(source, paths, config)
        outcomes = list(await asyncio.gather(*(asyncio.to_thread(job.run, self.encoder) for job in jobs)))
        self._emit_outcomes(outcomes, jobs)
        return outcomes

    def _emit_outcomes(self, outcomes: list[JobOutcome], jobs: list[Job] | None = None) -> None:
        for index, outcome in enumerate(outcomes):
            quality = _job_quality(jobs[index]) if jobs else None
            self._emit(event_for_outcome(outcome, quality))

    def _emit(self, event: ConverterEvent) -> None:
        if self.on_event:
            self.on_event(event)


def _job_quality(job: Job) -> int:
    if isinstance(job, CompressionJob):
        return job.quality
    return job.spec.quality
