"""heapscope.bridge -- Pythonic wrapper around LLDB's SB API.

This package hides LLDB's C++ naming conventions behind a small,
read-only interface: attach to a process or open a core image, look up
type layouts and symbols, and read raw memory.  LLDB must be available as
a Python module; if it is not, a clear ``RuntimeError`` is raised when
attempting to create a :class:`Debugger`.

Example::

    from heapscope.bridge import Debugger

    with Debugger() as dbg:
        target, process = dbg.load_core("/usr/lib/jvm/bin/java", "core.1234")
        fields = target.lookup_type_fields("ShenandoahHeap")
"""

from __future__ import annotations

from .debugger import Debugger
from .memory import (
    byte_order_prefix,
    pointer_size,
    read_pointer,
    read_pointer_at,
    read_uint32,
    read_uint64,
)
from .process import Process
from .target import Target
from .types import ProcessState, SymbolInfo, TypeMember

__all__ = [
    # Core classes
    "Debugger",
    "Target",
    "Process",
    # Types
    "ProcessState",
    "SymbolInfo",
    "TypeMember",
    # Memory utilities
    "byte_order_prefix",
    "pointer_size",
    "read_pointer",
    "read_pointer_at",
    "read_uint32",
    "read_uint64",
]
