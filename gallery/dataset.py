"""Read artwork records from the tab-separated dataset.

Each non-blank line is ``<title>\\t<encoded artwork>``.  Records are numbered
in file order starting at 0; the number names the record's PNG.  A line
that cannot be split still consumes its number, so later records keep
stable image names.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from ansi_pixels.errors import ArtworkError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtworkRecord:
    """One row of the dataset: a display title plus its encoded artwork."""
    index: int
    title: str
    encoded: str


class RecordFormatError(ArtworkError):
    """A dataset line is not ``title<TAB>encoded``."""

    stage = "read"

    def __init__(self, index: int, line: str):
        preview = line if len(line) <= 60 else line[:57] + "..."
        super().__init__(f"missing a tab separator: {preview!r}")
        self.index = index
        self.line = line
        self.with_record(index)

    @property
    def record(self) -> ArtworkRecord:
        """Placeholder record so the line can be reported like any other."""
        return ArtworkRecord(index=self.index, title="", encoded=self.line)


def parse_record(line: str, index: int) -> ArtworkRecord:
    line = line.rstrip("\r\n")
    title, sep, rest = line.partition("\t")
    if not sep:
        raise RecordFormatError(index, line)
    # extra columns are ignored
    encoded = rest.split("\t", 1)[0].strip()
    return ArtworkRecord(index=index, title=title, encoded=encoded)


def iter_records(
    lines: Iterable[str],
    rejected: Optional[List[RecordFormatError]] = None,
) -> Iterator[ArtworkRecord]:
    """Yield records from ``lines``, skipping blank ones.

    Without ``rejected`` a bad line raises :class:`RecordFormatError`;
    with it, the error is appended there and reading continues.
    """
    index = 0
    for line in lines:
        if not line.strip():
            continue
        try:
            record = parse_record(line, index)
        except RecordFormatError as exc:
            if rejected is None:
                raise
            logger.error("Skipping %s", exc)
            rejected.append(exc)
            record = None
        index += 1
        if record is not None:
            yield record


def read_records(
    path: Path,
    rejected: Optional[List[RecordFormatError]] = None,
) -> List[ArtworkRecord]:
    """Load every record from the dataset at ``path``."""
    with Path(path).open(encoding="utf-8") as handle:
        records = list(iter_records(handle, rejected))
    logger.info("Loaded %d record(s) from %s", len(records), path)
    return records
