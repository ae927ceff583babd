"""Bridge-level types for the LLDB wrapper.

Provides enums and dataclasses that map LLDB concepts to clean Python types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class ProcessState(Enum):
    """Maps LLDB process states to a Python enum."""

    INVALID = auto()
    UNLOADED = auto()
    CONNECTED = auto()
    ATTACHING = auto()
    LAUNCHING = auto()
    STOPPED = auto()
    RUNNING = auto()
    STEPPING = auto()
    CRASHED = auto()
    DETACHED = auto()
    EXITED = auto()
    SUSPENDED = auto()


@dataclass(frozen=True)
class TypeMember:
    """A data member of a debug-info type, with its byte offset.

    ``offset`` is relative to the start of the outermost type that was
    looked up, so members inherited from base classes already include the
    base-class offset.
    """

    name: str
    offset: int
    type_name: Optional[str] = None
    size: Optional[int] = None


@dataclass(frozen=True)
class SymbolInfo:
    """A resolved symbol and its load address."""

    name: str
    address: int
    module: str = ""
