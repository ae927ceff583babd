"""Reporter — human-readable summaries of the heap.

The one-line summary format is stable so output can be diffed::

    Shenandoah heap [0x7f0000000000, 0x7f0040000000] region size 1024 K
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from rich.console import Console
from rich.table import Table

from heapscope.core.errors import DataInconsistencyError
from heapscope.core.types.heap import HeapReport, RegionDescriptor, RegionState
from heapscope.core.walker import HeapWalker, RegionFilter, include_all

if TYPE_CHECKING:
    from heapscope.core.heap import HeapDescriptor

K = 1024

_STATE_CODES = {
    RegionState.LIVE: "L",
    RegionState.TRASH: "T",
    RegionState.UNCOMMITTED: "U",
    RegionState.EMPTY: "E",
}

_STATE_STYLES = {
    RegionState.LIVE: "green",
    RegionState.TRASH: "red",
    RegionState.UNCOMMITTED: "dim",
    RegionState.EMPTY: "cyan",
}

LEGEND = "L=live, T=trash, U=uncommitted, E=empty"


class Reporter:
    """Formats a :class:`HeapDescriptor`; never touches target state."""

    def __init__(self, heap: HeapDescriptor, heap_name: str = "Shenandoah") -> None:
        self._heap = heap
        self._walker = HeapWalker(heap)
        self.heap_name = heap_name

    def describe(self) -> HeapReport:
        """Return the heap's counters exactly as read, without unit conversion.

        Raises
        ------
        DataInconsistencyError
            If ``used > committed`` or ``committed`` exceeds the reserved range.
        """
        num_regions = self._heap.num_regions()
        used = self._heap.used()
        committed = self._heap.committed()
        start, end = self._heap.reserved_region()

        if used > committed:
            raise DataInconsistencyError(
                f"used ({used}) exceeds committed ({committed})"
            )
        if committed > end - start:
            raise DataInconsistencyError(
                f"committed ({committed}) exceeds reserved ({end - start})"
            )
        return HeapReport(
            num_regions=num_regions,
            used=used,
            committed=committed,
            address_range=(start, end),
        )

    def format_summary(self) -> str:
        start, end = self._heap.reserved_region()
        region_k = self._heap.region_size_bytes() // K
        return f"{self.heap_name} heap [{start:#x}, {end:#x}] region size {region_k} K"

    def format_status(self) -> str:
        """Multi-line occupancy summary: totals in K and the region geometry."""
        report = self.describe()
        region_k = self._heap.region_size_bytes() // K
        return "\n".join(
            [
                f"{self.heap_name} Heap",
                f" {self._heap.capacity() // K}K total, "
                f"{report.committed // K}K committed, {report.used // K}K used",
                f" {report.num_regions} x {region_k}K regions",
            ]
        )

    def region_table(self, region_filter: Optional[RegionFilter] = None) -> Table:
        """Build a rich table of the regions admitted by *region_filter*.

        All regions are listed by default.
        """
        regions: List[RegionDescriptor] = self._walker.regions(region_filter or include_all)

        table = Table(title=f"{self.heap_name} Regions", caption=LEGEND)
        table.add_column("#", justify="right")
        table.add_column("S")
        table.add_column("Region", style="dim")
        table.add_column("Bottom")
        table.add_column("Top")
        table.add_column("End")
        table.add_column("Used", justify="right")
        for region in regions:
            table.add_row(
                str(region.index),
                f"[{_STATE_STYLES[region.state]}]{_STATE_CODES[region.state]}[/]",
                f"{region.base_address:#x}",
                f"{region.bottom:#x}",
                f"{region.top:#x}",
                f"{region.end:#x}",
                f"{region.used_bytes // K}K",
            )
        return table

    def print_on(self, console: Optional[Console] = None, regions: bool = False,
                 region_filter: Optional[RegionFilter] = None) -> None:
        """Print the summary, the status block and optionally the region table."""
        console = console or Console()
        console.print(self.format_summary(), highlight=False)
        console.print(self.format_status(), highlight=False)
        if regions:
            console.print(self.region_table(region_filter))
