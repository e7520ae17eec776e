"""Build the ANSI Pixels example gallery.

Usage:
    python -m gallery.cli [dataset.tsv] [-o <output_dir>] [--image-dir img]
                          [--workers N] [--fail-fast] [--strict] [--debug]

Steps:
  1. Read ``title<TAB>encoded`` records from the dataset
  2. Render every record to ``<output_dir>/<image_dir>/<index>.png`` concurrently
  3. Wait for all images, then write ``<output_dir>/index.html``
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from gallery.builder import GalleryBuildError, build_images
from gallery.config import DEFAULT_DATASET, GalleryConfig
from gallery.dataset import RecordFormatError, read_records
from gallery.page import write_page

logger = logging.getLogger("gallery")


def _setup_logging(debug: bool = False):
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render ANSI Pixels artworks to PNG and build an HTML gallery.",
    )
    parser.add_argument("dataset", nargs="?", type=Path, default=DEFAULT_DATASET,
                        help=f"TSV of title<TAB>encoded records (default: {DEFAULT_DATASET})")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."),
                        help="Directory for index.html and the image folder (default: .)")
    parser.add_argument("--image-dir", default="img",
                        help="Image folder name, relative to the output dir (default: img)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Maximum concurrent render workers")
    parser.add_argument("--fail-fast", action="store_true",
                        help="Do not write the page if any record fails")
    parser.add_argument("--strict", action="store_true",
                        help="Exit non-zero when any record fails")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.debug)

    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be positive")

    config = GalleryConfig(
        dataset_path=args.dataset,
        output_dir=args.output_dir,
        image_dir_name=args.image_dir,
        max_workers=args.workers,
        fail_fast=args.fail_fast,
    )

    rejected: List[RecordFormatError] = []
    try:
        records = read_records(config.dataset_path, rejected)
    except FileNotFoundError:
        logger.error("Dataset not found: %s", config.dataset_path)
        return 1

    try:
        report = build_images(records, config, rejected)
    except GalleryBuildError as e:
        logger.error("Gallery not written: %s", e)
        return 1

    write_page(report.rendered, config)

    if report.failures:
        logger.warning("%d record(s) skipped:", len(report.failures))
        for failure in report.failures:
            logger.warning("  %s", failure.describe())
        if args.strict:
            return 1

    logger.info("Done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
