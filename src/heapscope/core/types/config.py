from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, field_validator, model_validator


class LayoutConfig(BaseModel):
    """Names of the types, fields and symbols describing the heap layout.

    Defaults match HotSpot's Shenandoah collector.
    """

    heap_type: str = "ShenandoahHeap"
    num_regions_field: str = "_num_regions"
    used_field: str = "_used"
    committed_field: str = "_committed"
    regions_field: str = "_regions"
    reserved_field: str = "_reserved"

    mem_region_type: str = "MemRegion"
    mem_region_start_field: str = "_start"
    mem_region_word_size_field: str = "_word_size"

    region_type: str = "ShenandoahHeapRegion"
    region_state_field: str = "_state"
    region_bottom_field: str = "_bottom"
    region_end_field: str = "_end"
    region_top_field: str = "_top"

    heap_symbol: str = "Universe::_collectedHeap"
    region_size_symbol: str = "ShenandoahHeapRegion::RegionSizeBytes"

    # Skips the region-size symbol lookup when set.
    region_size_bytes: Optional[int] = None

    @field_validator("region_size_bytes")
    @classmethod
    def _positive_region_size(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("region_size_bytes must be positive")
        return value


class StateCodesConfig(BaseModel):
    """Raw region state codes grouped by classification.

    A code may appear in several groups; classification resolves overlaps
    in the order trash, uncommitted, empty, live.  Defaults follow the
    collector's ``RegionState`` enum: 0 empty-uncommitted, 1 empty-committed,
    2 regular, 3 humongous start, 4 humongous continuation, 5 pinned
    humongous start, 6 collection set, 7 pinned, 8 pinned collection set,
    9 trash.
    """

    trash: List[int] = [9]
    uncommitted: List[int] = [0]
    empty: List[int] = [0, 1]
    live: List[int] = [2, 3, 4, 5, 6, 7, 8]

    @model_validator(mode="after")
    def _non_negative(self) -> "StateCodesConfig":
        for code in self.trash + self.uncommitted + self.empty + self.live:
            if code < 0:
                raise ValueError(f"state code {code} must be non-negative")
        return self


class HeapscopeConfig(BaseModel):
    """Top-level heapscope configuration."""

    layout: LayoutConfig = LayoutConfig()
    states: StateCodesConfig = StateCodesConfig()
    heap_name: str = "Shenandoah"
    verbose: bool = False


def load_config(path: Optional[str] = None) -> HeapscopeConfig:
    """Load configuration from a heapscope.toml file, falling back to defaults.

    Uses ``tomllib`` on Python 3.11+ and ``tomli`` on older versions.
    """

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib  # type: ignore[no-redef]
        except ImportError:
            if path is None:
                return HeapscopeConfig()
            raise

    config_path = Path(path) if path else Path("heapscope.toml")

    if not config_path.exists():
        return HeapscopeConfig()

    with open(config_path, "rb") as f:
        raw = tomllib.load(f)

    return HeapscopeConfig(**raw)
