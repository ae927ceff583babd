"""HeapWalker — sequential traversal of the region table."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from heapscope.core.errors import TargetUnavailableError
from heapscope.core.types.heap import RegionDescriptor, RegionState

if TYPE_CHECKING:
    from heapscope.core.heap import HeapDescriptor

logger = logging.getLogger(__name__)

RegionFilter = Callable[[RegionState], bool]
RegionVisitor = Callable[[RegionDescriptor], None]


def exclude_non_live(state: RegionState) -> bool:
    """Default filter: admit only live regions."""
    return state is RegionState.LIVE


def include_all(state: RegionState) -> bool:
    return True


def only(*states: RegionState) -> RegionFilter:
    """Build a filter admitting exactly *states*."""
    wanted = frozenset(states)
    return lambda state: state in wanted


class HeapWalker:
    """Visits regions in ascending index order.

    Walks are single-pass and deterministic for a fixed snapshot.  The first
    failed read aborts the walk: regions already visited stay visited, the
    error propagates, and later indices are never decoded.
    """

    def __init__(self, heap: HeapDescriptor) -> None:
        self._heap = heap

    def iterate(
        self,
        visitor: RegionVisitor,
        region_filter: Optional[RegionFilter] = None,
    ) -> None:
        """Call *visitor* for every region whose state passes *region_filter*.

        *region_filter* defaults to :func:`exclude_non_live`.
        """
        accept = region_filter or exclude_non_live
        count = self._heap.num_regions()
        logger.debug("Walking %d regions", count)

        visited = 0
        for index in range(count):
            try:
                region = self._heap.region_at(index)
            except TargetUnavailableError as exc:
                logger.warning("Walk aborted at region %d: %s", index, exc)
                raise
            if accept(region.state):
                visitor(region)
                visited += 1

        logger.debug("Visited %d of %d regions", visited, count)

    def regions(self, region_filter: Optional[RegionFilter] = None) -> List[RegionDescriptor]:
        """Collect the regions :meth:`iterate` would visit."""
        result: List[RegionDescriptor] = []
        self.iterate(result.append, region_filter)
        return result

    def count_by_state(self) -> Dict[RegionState, int]:
        """Count every region per :class:`RegionState`."""
        counts = {state: 0 for state in RegionState}

        def tally(region: RegionDescriptor) -> None:
            counts[region.state] += 1

        self.iterate(tally, include_all)
        return counts
