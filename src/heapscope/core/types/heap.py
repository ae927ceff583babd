from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from pydantic import BaseModel


class RegionState(Enum):
    """Exclusive classification of a heap region."""

    LIVE = "live"
    TRASH = "trash"
    UNCOMMITTED = "uncommitted"
    EMPTY = "empty"


@dataclass(frozen=True)
class RegionDescriptor:
    """One region as decoded from the region table.

    ``base_address`` is the region object pointer stored in the table slot;
    ``bottom``/``end``/``top`` delimit the heap memory the region covers.
    """

    index: int
    base_address: int
    bottom: int
    end: int
    top: int
    state: RegionState
    raw_state: int

    @property
    def size_bytes(self) -> int:
        return self.end - self.bottom

    @property
    def used_bytes(self) -> int:
        return self.top - self.bottom


class HeapReport(BaseModel):
    """Aggregate occupancy of the heap at the time of the reads."""

    num_regions: int
    used: int
    committed: int
    address_range: Tuple[int, int]
