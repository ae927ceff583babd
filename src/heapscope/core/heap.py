"""HeapDescriptor — live reads of the collector's global heap state.

Nothing here is cached: every getter and every :meth:`region_at` call goes
back to target memory, so results reflect the snapshot at call time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Tuple

from heapscope.core.errors import DataInconsistencyError, InvalidRegionIndexError
from heapscope.core.types.config import StateCodesConfig
from heapscope.core.types.heap import RegionDescriptor, RegionState

if TYPE_CHECKING:
    from heapscope.core.session import AttachSession

logger = logging.getLogger(__name__)

# Forwarding-pointer word placed in front of every object.
OOP_EXTRA_WORDS = 1
# Word offset external object decoders use to find an object's region.
OOP_REGION_OFFSET_WORDS = 1


def classify_state(raw: int, codes: StateCodesConfig) -> RegionState:
    """Map a raw region state code to exactly one :class:`RegionState`.

    Precedence is trash, uncommitted, empty, then live.  A code that matches
    no group raises :class:`DataInconsistencyError`.
    """
    if raw in codes.trash:
        return RegionState.TRASH
    if raw in codes.uncommitted:
        return RegionState.UNCOMMITTED
    if raw in codes.empty:
        return RegionState.EMPTY
    if raw in codes.live:
        return RegionState.LIVE
    raise DataInconsistencyError(f"Unknown region state code {raw}")


class HeapDescriptor:
    """Reads the heap descriptor through a resolved :class:`AttachSession`."""

    def __init__(self, session: AttachSession) -> None:
        # Fails fast if the session never resolved.
        session.heap_layout
        self._session = session

    @property
    def session(self) -> AttachSession:
        return self._session

    def _read_word(self, offset: int) -> int:
        return self._session.reader.read_word(self._session.heap_address + offset)

    # -- counters ----------------------------------------------------------

    def num_regions(self) -> int:
        return self._read_word(self._session.heap_layout.num_regions)

    def used(self) -> int:
        # 64-bit on every target, unlike the size_t counters.
        layout = self._session.heap_layout
        return self._session.reader.read_uint64(self._session.heap_address + layout.used)

    def committed(self) -> int:
        return self._read_word(self._session.heap_layout.committed)

    def region_table_base(self) -> int:
        return self._read_word(self._session.heap_layout.regions)

    def reserved_region(self) -> Tuple[int, int]:
        """Return the reserved heap address range as ``(start, end)``."""
        layout = self._session.heap_layout
        start = self._read_word(layout.reserved_start)
        word_size = self._read_word(layout.reserved_word_size)
        return start, start + word_size * self._session.reader.pointer_size

    def region_size_bytes(self) -> int:
        return self._session.region_size_bytes

    def capacity(self) -> int:
        return self.num_regions() * self.region_size_bytes()

    def is_in(self, address: int) -> bool:
        """True if *address* falls inside the span covered by regions."""
        start, _ = self.reserved_region()
        return start <= address < start + self.capacity()

    # -- object layout -----------------------------------------------------

    def oop_extra_words(self) -> int:
        return OOP_EXTRA_WORDS

    def oop_region_offset_words(self) -> int:
        return OOP_REGION_OFFSET_WORDS

    # -- regions -----------------------------------------------------------

    def region_at(self, index: int) -> RegionDescriptor:
        """Decode region *index* from the region table.

        Raises
        ------
        InvalidRegionIndexError
            If *index* is outside ``[0, num_regions())``; the table is not
            read in that case.
        TargetUnavailableError
            If any read fails.
        DataInconsistencyError
            If the state code is unknown or the bounds are inverted.
        """
        if index < 0:
            raise InvalidRegionIndexError(index)
        count = self.num_regions()
        if index >= count:
            raise InvalidRegionIndexError(index, count)

        reader = self._session.reader
        layout = self._session.region_layout
        address = reader.read_address_at(self.region_table_base(), index)

        raw_state = reader.read_uint32(address + layout.state)
        bottom = reader.read_word(address + layout.bottom)
        end = reader.read_word(address + layout.end)
        top = reader.read_word(address + layout.top)

        if end < bottom:
            raise DataInconsistencyError(
                f"Region {index} has end {end:#x} below bottom {bottom:#x}"
            )
        state = classify_state(raw_state, self._session.config.states)
        return RegionDescriptor(
            index=index,
            base_address=address,
            bottom=bottom,
            end=end,
            top=top,
            state=state,
            raw_state=raw_state,
        )
