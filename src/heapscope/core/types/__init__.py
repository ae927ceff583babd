from __future__ import annotations

from heapscope.core.types.config import (
    HeapscopeConfig,
    LayoutConfig,
    StateCodesConfig,
    load_config,
)
from heapscope.core.types.heap import HeapReport, RegionDescriptor, RegionState
from heapscope.core.types.layout import LAYOUT_VERSION, HeapLayout, RegionLayout

__all__ = [
    # config
    "HeapscopeConfig",
    "LayoutConfig",
    "StateCodesConfig",
    "load_config",
    # heap
    "HeapReport",
    "RegionDescriptor",
    "RegionState",
    # layout
    "LAYOUT_VERSION",
    "HeapLayout",
    "RegionLayout",
]
