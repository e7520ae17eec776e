"""Render every dataset record to PNG and wait for all of them.

One task is spawned per record on an asyncio loop; each task hands the
blocking decode/rasterize/save work to a thread pool.  The task handles are
joined with ``asyncio.gather`` before anything downstream (the page) runs.
Records share no state, so no locking is involved.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ansi_pixels.decoder import decode_artwork
from ansi_pixels.errors import ArtworkError, ImageWriteError
from ansi_pixels.rasterizer import rasterize

from gallery.config import GalleryConfig
from gallery.dataset import ArtworkRecord, RecordFormatError

logger = logging.getLogger(__name__)


@dataclass
class RenderedArtwork:
    """A record whose PNG was written successfully."""
    record: ArtworkRecord
    image_path: Path
    image_href: str = ""
    width: int = 0
    height: int = 0


@dataclass
class RecordFailure:
    """A record that could not be turned into a PNG."""
    record: ArtworkRecord
    error: ArtworkError

    @property
    def stage(self) -> str:
        return self.error.stage

    def describe(self) -> str:
        return str(self.error)


@dataclass
class BuildReport:
    """Outcome of one build: successes in dataset order plus failures."""
    rendered: List[RenderedArtwork] = field(default_factory=list)
    failures: List[RecordFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class GalleryBuildError(RuntimeError):
    """Raised in fail-fast mode when any record failed."""

    def __init__(self, failures: Sequence[RecordFailure]):
        self.failures = list(failures)
        lines = [f.describe() for f in self.failures]
        super().__init__(
            f"{len(lines)} record(s) failed:\n  " + "\n  ".join(lines)
        )


def render_record(record: ArtworkRecord, image_path: Path, image_href: str = "") -> RenderedArtwork:
    """Decode, rasterize and write one record.

    Raises:
        ArtworkError: tagged with the record index and title.
    """
    try:
        doc = decode_artwork(record.encoded)
        image = rasterize(doc)
    except ArtworkError as exc:
        exc.with_record(record.index, record.title)
        raise

    try:
        image.save(image_path)
    except OSError as exc:
        raise ImageWriteError(f"Cannot write {image_path}: {exc}").with_record(
            record.index, record.title
        ) from exc

    logger.info("Write png: %s => %s", record.title, image_path)
    return RenderedArtwork(
        record=record,
        image_path=image_path,
        image_href=image_href or str(image_path),
        width=image.width,
        height=image.height,
    )


async def _render_all(
    records: Sequence[ArtworkRecord],
    config: GalleryConfig,
) -> List[Union[RenderedArtwork, BaseException]]:
    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        tasks = [
            loop.run_in_executor(
                executor,
                render_record,
                record,
                config.image_path(record.index),
                config.image_href(record.index),
            )
            for record in records
        ]
        return await asyncio.gather(*tasks, return_exceptions=True)


def build_images(
    records: Sequence[ArtworkRecord],
    config: Optional[GalleryConfig] = None,
    rejected: Sequence[RecordFormatError] = (),
) -> BuildReport:
    """Write one PNG per record and join on all of them.

    Failed records are collected in the report, together with any dataset
    lines in ``rejected`` that could not be parsed, ordered by record index.
    In ``config.fail_fast`` mode a :class:`GalleryBuildError` is raised once
    every task has finished.  Errors that are not :class:`ArtworkError` are
    bugs and propagate as is.
    """
    config = config or GalleryConfig()
    config.ensure_dirs()

    results = asyncio.run(_render_all(records, config)) if records else []

    report = BuildReport()
    for error in rejected:
        report.failures.append(RecordFailure(record=error.record, error=error))
    for record, result in zip(records, results):
        if isinstance(result, ArtworkError):
            logger.error("Skipping record %d: %s", record.index, result)
            report.failures.append(RecordFailure(record=record, error=result))
        elif isinstance(result, BaseException):
            raise result
        else:
            report.rendered.append(result)
    report.failures.sort(key=lambda f: f.record.index)

    logger.info(
        "Rendered %d/%d artwork(s) into %s",
        len(report.rendered), len(records) + len(rejected), config.image_dir,
    )
    if config.fail_fast and report.failures:
        raise GalleryBuildError(report.failures)
    return report
