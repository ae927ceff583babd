"""Tests for Reporter."""

from __future__ import annotations

import pytest
from rich.console import Console

from heap_fixtures import HEAP_BASE, REGULAR, TRASH, MiB
from heapscope.core.errors import DataInconsistencyError
from heapscope.core.report import LEGEND, Reporter
from heapscope.core.types.heap import HeapReport


def _reporter(image, name="Shenandoah"):
    return Reporter(image.session().heap(), heap_name=name)


class TestDescribe:
    def test_values_are_unmodified(self, heap_image):
        image = heap_image([], used=300 * MiB, committed=512 * MiB, num_regions=1024)
        report = _reporter(image).describe()
        assert isinstance(report, HeapReport)
        assert report.num_regions == 1024
        assert report.committed == 512 * 1024 * 1024
        assert report.used == 300 * 1024 * 1024
        assert report.address_range == (HEAP_BASE, HEAP_BASE + 1024 * MiB)

    def test_zero_regions(self, heap_image):
        report = _reporter(heap_image([], used=0, committed=0)).describe()
        assert report.num_regions == 0
        assert report.used == 0
        assert report.committed == 0

    def test_used_not_above_committed(self, heap_image):
        image = heap_image([REGULAR, REGULAR], used=2 * MiB, committed=2 * MiB)
        report = _reporter(image).describe()
        assert report.used <= report.committed

    def test_used_exceeds_committed(self, heap_image):
        image = heap_image([REGULAR], used=2 * MiB, committed=MiB)
        with pytest.raises(DataInconsistencyError, match="exceeds committed"):
            _reporter(image).describe()

    def test_committed_exceeds_reserved(self, heap_image):
        image = heap_image([REGULAR], used=0, committed=3 * MiB)
        with pytest.raises(DataInconsistencyError, match="exceeds reserved"):
            _reporter(image).describe()


class TestFormatting:
    def test_summary_line(self, heap_image):
        image = heap_image([REGULAR] * 4)
        assert _reporter(image).format_summary() == (
            "Shenandoah heap [0x7f0000000000, 0x7f0000400000] region size 1024 K"
        )

    def test_summary_uses_heap_name(self, heap_image):
        image = heap_image([REGULAR], region_size=256 * 1024)
        line = _reporter(image, name="Experimental").format_summary()
        assert line.startswith("Experimental heap [")
        assert line.endswith("region size 256 K")

    def test_status(self, heap_image):
        image = heap_image([REGULAR, REGULAR, TRASH, REGULAR], used=MiB, committed=3 * MiB)
        assert _reporter(image).format_status().splitlines() == [
            "Shenandoah Heap",
            " 4096K total, 3072K committed, 1024K used",
            " 4 x 1024K regions",
        ]

    def test_region_table_lists_all_by_default(self, live_heap):
        table = _reporter(live_heap).region_table()
        assert table.row_count == 4
        assert table.caption == LEGEND

    def test_print_on(self, live_heap):
        console = Console(record=True, width=160)
        _reporter(live_heap).print_on(console, regions=True)
        text = console.export_text()
        assert "Shenandoah heap [0x7f0000000000, 0x7f0000400000] region size 1024 K" in text
        assert "4 x 1024K regions" in text
        assert "Shenandoah Regions" in text
        assert "T" in text

    def test_print_on_without_regions(self, live_heap):
        console = Console(record=True, width=160)
        _reporter(live_heap).print_on(console)
        assert "Regions" not in console.export_text()
