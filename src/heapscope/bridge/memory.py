"""Memory utility functions for reading process memory.

All functions accept a :class:`~heapscope.bridge.process.Process` instance
as their first argument.  Only reads are offered; the inspected process is
never modified.  Integers are decoded in the target's byte order.
"""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING

try:
    import lldb
except ImportError:
    lldb = None  # type: ignore[assignment]

if TYPE_CHECKING:
    from .process import Process


# ---------------------------------------------------------------------------
# Target geometry
# ---------------------------------------------------------------------------

def pointer_size(process: Process) -> int:
    """Return the target's address size in bytes (4 or 8)."""
    sb_target = process._sb.GetTarget()
    return sb_target.GetAddressByteSize() if sb_target else 8


def byte_order_prefix(process: Process) -> str:
    """Return the :mod:`struct` byte-order prefix for the target.

    ``">"`` for big-endian targets, ``"<"`` otherwise.
    """
    if lldb is None:
        return "<"
    sb_target = process._sb.GetTarget()
    if sb_target and sb_target.GetByteOrder() == lldb.eByteOrderBig:
        return ">"
    return "<"


def _unpack(process: Process, code: str, address: int, size: int) -> int:
    data = process.read_memory(address, size)
    return struct.unpack(byte_order_prefix(process) + code, data)[0]


# ---------------------------------------------------------------------------
# Pointer reading
# ---------------------------------------------------------------------------

def read_pointer(process: Process, address: int) -> int:
    """Read a pointer-sized integer from *address*.

    The pointer size is determined by the target architecture (4 or 8 bytes).
    """
    ptr_size = pointer_size(process)
    return _unpack(process, "Q" if ptr_size == 8 else "I", address, ptr_size)


def read_pointer_at(process: Process, base: int, index: int) -> int:
    """Read element *index* of a pointer array starting at *base*."""
    return read_pointer(process, base + index * pointer_size(process))


# ---------------------------------------------------------------------------
# Fixed-width integer reads
# ---------------------------------------------------------------------------

def read_uint32(process: Process, address: int) -> int:
    """Read an unsigned 32-bit integer."""
    return _unpack(process, "I", address, 4)


def read_uint64(process: Process, address: int) -> int:
    """Read an unsigned 64-bit integer, whatever the pointer size."""
    return _unpack(process, "Q", address, 8)
