"""Exception hierarchy for heap inspection.

Every error raised by :mod:`heapscope.core` derives from
:class:`HeapscopeError`.  Nothing is retried automatically; callers decide
whether to re-attach and walk again.
"""

from __future__ import annotations

from typing import Iterable, Optional


class HeapscopeError(Exception):
    """Base class for all heap inspection errors."""


class MetadataMissingError(HeapscopeError):
    """Type or field metadata required for layout resolution is absent.

    Fatal for the session that raised it: no read is attempted afterwards.
    """

    def __init__(self, type_name: str, missing: Iterable[str] = ()) -> None:
        self.type_name = type_name
        self.missing = sorted(missing)
        if self.missing:
            msg = f"Type '{type_name}' is missing fields: {', '.join(self.missing)}"
        else:
            msg = f"Type '{type_name}' not found in target metadata"
        super().__init__(msg)


class SessionStateError(HeapscopeError):
    """The session is not resolved, has failed, or has been detached."""


class InvalidRegionIndexError(HeapscopeError, IndexError):
    """A region index outside ``[0, num_regions)`` was requested."""

    def __init__(self, index: int, num_regions: Optional[int] = None) -> None:
        self.index = index
        self.num_regions = num_regions
        if num_regions is None:
            msg = f"Region index {index} is negative"
        else:
            msg = f"Region index {index} out of range [0, {num_regions})"
        super().__init__(msg)


class TargetUnavailableError(HeapscopeError):
    """A memory read failed: unmapped address or the target is gone."""

    def __init__(self, address: int, length: int, reason: Optional[str] = None) -> None:
        self.address = address
        self.length = length
        msg = f"Cannot read {length} bytes at {address:#x}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class DataInconsistencyError(HeapscopeError):
    """Values read from the target contradict the collector's invariants."""
