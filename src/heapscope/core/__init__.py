"""heapscope — out-of-process inspection of region-based collector heaps."""

from __future__ import annotations

from heapscope.core.access import (
    LLDBTypeResolver,
    MemoryReader,
    ProcessMemoryReader,
    TypeResolver,
)
from heapscope.core.errors import (
    DataInconsistencyError,
    HeapscopeError,
    InvalidRegionIndexError,
    MetadataMissingError,
    SessionStateError,
    TargetUnavailableError,
)
from heapscope.core.heap import HeapDescriptor, classify_state
from heapscope.core.heapscope import Heapscope
from heapscope.core.report import Reporter
from heapscope.core.session import AttachSession
from heapscope.core.types.config import HeapscopeConfig, load_config
from heapscope.core.types.heap import HeapReport, RegionDescriptor, RegionState
from heapscope.core.walker import HeapWalker, exclude_non_live, include_all, only

__all__ = [
    "Heapscope",
    "AttachSession",
    "HeapDescriptor",
    "HeapWalker",
    "Reporter",
    "HeapReport",
    "RegionDescriptor",
    "RegionState",
    "HeapscopeConfig",
    "load_config",
    "classify_state",
    "exclude_non_live",
    "include_all",
    "only",
    # seams
    "TypeResolver",
    "MemoryReader",
    "LLDBTypeResolver",
    "ProcessMemoryReader",
    # errors
    "HeapscopeError",
    "MetadataMissingError",
    "SessionStateError",
    "InvalidRegionIndexError",
    "TargetUnavailableError",
    "DataInconsistencyError",
]
