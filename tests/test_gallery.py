"""Tests for the gallery orchestration: dataset reading, concurrent image
builds with failure reporting, and page generation.
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from PIL import Image

from ansi_pixels.decoder import ArtworkDocument, encode_artwork
from ansi_pixels.errors import EncodingError, InvalidColorCode
from gallery.builder import (
    GalleryBuildError,
    RenderedArtwork,
    build_images,
    render_record,
)
from gallery.config import GalleryConfig
from gallery.dataset import ArtworkRecord, RecordFormatError, iter_records, parse_record, read_records
from gallery.page import render_page, terminal_command, write_page


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _encoded(rows, pixel_size: int = 2) -> str:
    return encode_artwork(ArtworkDocument.from_rows(rows, pixel_size))


def _make_records() -> list:
    return [
        ArtworkRecord(0, "heart", _encoded([[None, 1, None], [1, 1, 1], [None, 1, None]])),
        ArtworkRecord(1, "broken", "not*base64"),
        ArtworkRecord(2, "sky", _encoded([[21, 27], [33, 39]], pixel_size=3)),
        ArtworkRecord(3, "glitch", _encoded([[1, 999]])),
    ]


def _make_config(tmp_path: Path, **overrides) -> GalleryConfig:
    return GalleryConfig(output_dir=tmp_path / "site", **overrides)


# ---------------------------------------------------------------------------
# Tests: dataset
# ---------------------------------------------------------------------------

class TestDataset:
    def test_parse_record(self):
        record = parse_record("Cat face\teJyLjgUAARUAuQ\r\n", 4)
        assert record == ArtworkRecord(4, "Cat face", "eJyLjgUAARUAuQ")

    def test_missing_tab(self):
        with pytest.raises(RecordFormatError) as excinfo:
            parse_record("no separator here", 7)
        assert excinfo.value.index == 7
        assert excinfo.value.stage == "read"
        assert "record 7 [read]" in str(excinfo.value)

    def test_lines_without_tab_collected_and_numbered(self):
        lines = ["a\tAAA\n", "no tab here\n", "b\tBBB\n"]
        rejected = []
        records = list(iter_records(lines, rejected))
        assert [(r.index, r.title) for r in records] == [(0, "a"), (2, "b")]
        assert [e.index for e in rejected] == [1]
        assert rejected[0].record.index == 1

    def test_lines_without_tab_raise_when_not_collected(self):
        with pytest.raises(RecordFormatError):
            list(iter_records(["a\tAAA\n", "no tab here\n"]))

    def test_blank_lines_skipped_and_not_counted(self):
        lines = ["a\tAAA\n", "\n", "   \n", "b\tBBB\n"]
        records = list(iter_records(lines))
        assert [(r.index, r.title) for r in records] == [(0, "a"), (1, "b")]

    def test_read_records(self, tmp_path):
        tsv = tmp_path / "data.tsv"
        tsv.write_text(textwrap.dedent("""\
            first\tAAAA
            second\tBBBB\textra column
        """), encoding="utf-8")
        records = read_records(tsv)
        assert [r.encoded for r in records] == ["AAAA", "BBBB"]


# ---------------------------------------------------------------------------
# Tests: builder
# ---------------------------------------------------------------------------

class TestBuilder:
    def test_render_record_writes_png(self, tmp_path):
        record = _make_records()[0]
        out = tmp_path / "0.png"
        rendered = render_record(record, out, "img/0.png")
        assert rendered.image_href == "img/0.png"
        assert (rendered.width, rendered.height) == (6, 6)
        with Image.open(out) as img:
            assert img.size == (6, 6)
            assert img.getpixel((2, 0)) == (204, 0, 0, 255)

    def test_render_record_tags_errors(self, tmp_path):
        record = _make_records()[1]
        with pytest.raises(EncodingError) as excinfo:
            render_record(record, tmp_path / "1.png")
        assert excinfo.value.record_index == 1
        assert excinfo.value.title == "broken"
        assert "record 1 ('broken') [decode]" in str(excinfo.value)

    def test_build_collects_successes_and_failures(self, tmp_path):
        config = _make_config(tmp_path, max_workers=2)
        report = build_images(_make_records(), config)

        assert [r.record.title for r in report.rendered] == ["heart", "sky"]
        assert not report.ok
        stages = {f.record.title: f.stage for f in report.failures}
        assert stages == {"broken": "decode", "glitch": "rasterize"}

        glitch = next(f for f in report.failures if f.record.title == "glitch")
        assert isinstance(glitch.error, InvalidColorCode)
        assert (glitch.error.x, glitch.error.y) == (1, 0)

        img_dir = config.image_dir
        assert (img_dir / "0.png").exists()
        assert (img_dir / "2.png").exists()
        assert not (img_dir / "1.png").exists()
        assert not (img_dir / "3.png").exists()

    def test_fail_fast_raises_after_join(self, tmp_path):
        config = _make_config(tmp_path, fail_fast=True)
        with pytest.raises(GalleryBuildError) as excinfo:
            build_images(_make_records(), config)
        assert len(excinfo.value.failures) == 2
        # successful records still finished writing
        assert (config.image_dir / "0.png").exists()

    def test_rejected_lines_join_the_failures(self, tmp_path):
        records = _make_records()
        rejected = [RecordFormatError(1, "junk line")]
        report = build_images([records[0], records[2]], _make_config(tmp_path), rejected)

        assert [r.record.index for r in report.rendered] == [0, 2]
        assert [(f.record.index, f.stage) for f in report.failures] == [(1, "read")]

    def test_rejected_lines_trip_fail_fast(self, tmp_path):
        config = _make_config(tmp_path, fail_fast=True)
        with pytest.raises(GalleryBuildError):
            build_images([_make_records()[0]], config, [RecordFormatError(1, "junk")])

    def test_no_records(self, tmp_path):
        report = build_images([], _make_config(tmp_path))
        assert report.ok
        assert report.rendered == []


# ---------------------------------------------------------------------------
# Tests: page
# ---------------------------------------------------------------------------

class TestPage:
    def _entries(self):
        return [
            RenderedArtwork(ArtworkRecord(0, "<b>Cat</b> & dog", "eJy-_"), Path("img/0.png"),
                            image_href="img/0.png", width=20, height=20),
            RenderedArtwork(ArtworkRecord(2, "Sky", "eJyZZ"), Path("img/2.png"),
                            image_href="img/2.png"),
        ]

    def test_terminal_command(self):
        cmd = terminal_command("abc", "https://example.com/x.py")
        assert cmd == "python -c \"$(curl -s https://example.com/x.py)\" 'abc'"

    def test_page_contents(self):
        page = render_page(self._entries(), GalleryConfig(), year=2024)
        assert "<title>ANSI Pixels Examples</title>" in page
        assert '<link rel="shortcut icon" href="favicon.png"' in page
        assert "&lt;b&gt;Cat&lt;/b&gt; &amp; dog" in page
        assert "<b>Cat</b>" not in page
        assert 'src="img/0.png"' in page
        assert 'width="20" height="20"' in page
        assert 'href="https://kui.github.io/ansi_pixels/#eJy-_">Edit this</a>' in page
        assert "$(curl -s https://raw.githubusercontent.com/kui/ansi_pixels/" in page
        assert "&#x27;eJy-_&#x27;" in page
        assert "Copyright &copy; 2024 - Keiichiro Ui" in page
        assert "Fork me on GitHub" in page

    def test_page_keeps_entry_order(self):
        page = render_page(self._entries(), GalleryConfig(), year=2024)
        assert page.index("img/0.png") < page.index("img/2.png")

    def test_write_page(self, tmp_path):
        config = _make_config(tmp_path, page_title="My Arts")
        path = write_page(self._entries(), config, year=2030)
        assert path == tmp_path / "site" / "index.html"
        text = path.read_text(encoding="utf-8")
        assert "<h1>My Arts</h1>" in text
        assert "2030" in text
