from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from image_format_converter.core.directories import DirectoryMaterializer
from image_format_converter.core.discovery import find_source_images
from image_format_converter.core.encoder import Encoder, PillowEncoder
from image_format_converter.core.events import ConverterEvent, EventCallback, EventKind, ProgressCallback
from image_format_converter.core.models import ConverterConfig, JobOutcome, RunReport, RunState
from image_format_converter.core.processor import FileProcessor

logger = logging.getLogger(__name__)


class BatchRunner:
    def __init__(
        self,
        config: ConverterConfig,
        encoder: Encoder | None = None,
        on_event: EventCallback | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.config = config
        self.encoder = encoder or PillowEncoder()
        self.on_event = on_event
        self.on_progress = on_progress

    def find_images(self) -> list[Path]:
        config = self.config
        return find_source_images(config.source_root, exclude=config.dest_root)

    def run(self) -> RunReport:
        return asyncio.run(self.run_async())

    async def run_async(self) -> RunReport:
        image_paths = self.find_images()
        total = len(image_paths)
        if total == 0:
            logger.info("No images found under %s", self.config.source_root)
            if self.on_event:
                self.on_event(ConverterEvent(EventKind.NO_INPUT_FILES, source=self.config.source_root))
            return RunReport(state=RunState.NO_INPUT_FILES, total_files=0)

        processor = FileProcessor(self.config, self.encoder, DirectoryMaterializer(), self.on_event)
        limit = asyncio.Semaphore(self.config.file_concurrency)
        done = 0

        async def process_one(index: int, source_path: Path) -> list[JobOutcome]:
            nonlocal done
            async with limit:
                if self.on_event:
                    self.on_event(ConverterEvent(EventKind.FILE_STARTED, source=source_path, detail=f"{index}/{total}"))
                outcomes = await processor.process(source_path)
            done += 1
            if self.on_progress:
                self.on_progress(done, total)
            return outcomes

        if self.config.file_concurrency == 1:
            per_file = [await process_one(index, path) for index, path in enumerate(image_paths, start=1)]
        else:
            per_file = await asyncio.gather(
                *(process_one(index, path) for index, path in enumerate(image_paths, start=1))
            )

        outcomes = [outcome for file_outcomes in per_file for outcome in file_outcomes]
        report = RunReport(state=RunState.COMPLETED, total_files=total, outcomes=outcomes)
        logger.info(
            "Processed %d files: %d jobs, %d failed",
            report.total_files,
            report.total_jobs,
            report.failed_jobs,
        )
        return report


class ImageFormatConverter:
    """Discovers, converts and compresses as soon as it is constructed.

    The finished :class:`RunReport` is available as ``report``.
    """

    def __init__(
        self,
        config: ConverterConfig | None = None,
        encoder: Encoder | None = None,
        on_event: EventCallback | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.config = config or ConverterConfig()
        self.runner = BatchRunner(self.config, encoder, on_event, on_progress)
        self.report = self.runner.run()
