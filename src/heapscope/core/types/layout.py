"""Resolved byte offsets for the collector's data structures."""

from __future__ import annotations

from typing import Dict, Mapping

from pydantic import BaseModel, ConfigDict

from heapscope.core.errors import MetadataMissingError

# Bumped whenever the set of offsets below changes shape.
LAYOUT_VERSION = 1


def pick_offsets(
    type_name: str, fields: Mapping[str, int], wanted: Mapping[str, str]
) -> Dict[str, int]:
    """Select the offsets named in *wanted* from a type's field map.

    *wanted* maps a layout attribute to the field name in the target.
    Every missing field is reported at once.
    """
    missing = [field for field in wanted.values() if field not in fields]
    if missing:
        raise MetadataMissingError(type_name, missing)
    return {attr: fields[field] for attr, field in wanted.items()}


class HeapLayout(BaseModel):
    """Offsets into the heap descriptor, relative to the heap address."""

    model_config = ConfigDict(frozen=True)

    version: int = LAYOUT_VERSION
    num_regions: int
    used: int
    committed: int
    regions: int
    reserved_start: int
    reserved_word_size: int


class RegionLayout(BaseModel):
    """Offsets into a single region object."""

    model_config = ConfigDict(frozen=True)

    version: int = LAYOUT_VERSION
    state: int
    bottom: int
    end: int
    top: int
