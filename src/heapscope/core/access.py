"""Seams to the inspected process: type metadata and raw memory reads.

The protocols below are all the core needs from a target.  The LLDB
implementations adapt :mod:`heapscope.bridge` and translate its
``RuntimeError``\\ s into the heapscope error hierarchy.
"""

from __future__ import annotations

import logging
import struct
from typing import TYPE_CHECKING, Mapping, Protocol, runtime_checkable

from heapscope.bridge.memory import (
    pointer_size,
    read_pointer,
    read_pointer_at,
    read_uint32,
    read_uint64,
)
from heapscope.core.errors import MetadataMissingError, TargetUnavailableError

if TYPE_CHECKING:
    from heapscope.bridge.process import Process
    from heapscope.bridge.target import Target

logger = logging.getLogger(__name__)


@runtime_checkable
class TypeResolver(Protocol):
    """Resolves symbolic metadata of the target."""

    def lookup_type(self, name: str) -> Mapping[str, int]:
        """Return ``{field_name: byte_offset}`` for type *name*.

        Raises :class:`MetadataMissingError` if the type is unknown.
        """
        ...

    def lookup_symbol(self, name: str) -> int:
        """Return the load address of global *name*.

        Raises :class:`MetadataMissingError` if the symbol is unknown.
        """
        ...


@runtime_checkable
class MemoryReader(Protocol):
    """Reads raw memory of the target.

    Every method raises :class:`TargetUnavailableError` on failure.
    """

    @property
    def pointer_size(self) -> int:
        ...

    def read(self, address: int, length: int) -> bytes:
        ...

    def read_word(self, address: int) -> int:
        """Read one pointer-sized unsigned word."""
        ...

    def read_uint32(self, address: int) -> int:
        ...

    def read_uint64(self, address: int) -> int:
        """Read one 8-byte unsigned integer, whatever the pointer size."""
        ...

    def read_address_at(self, base: int, index: int) -> int:
        """Read element *index* of the pointer array at *base*."""
        ...


class LLDBTypeResolver:
    """:class:`TypeResolver` backed by an LLDB :class:`Target`'s debug info."""

    def __init__(self, target: Target) -> None:
        self._target = target

    def lookup_type(self, name: str) -> Mapping[str, int]:
        try:
            members = self._target.lookup_type_fields(name)
        except RuntimeError as exc:
            raise MetadataMissingError(name) from exc
        logger.debug("Resolved type %s (%d fields)", name, len(members))
        return {field: member.offset for field, member in members.items()}

    def lookup_symbol(self, name: str) -> int:
        address = self._target.find_global_address(name)
        if address is None:
            raise MetadataMissingError(name)
        return address


class ProcessMemoryReader:
    """:class:`MemoryReader` over an LLDB :class:`Process` or core image."""

    def __init__(self, process: Process) -> None:
        self._process = process
        self._pointer_size = pointer_size(process)

    @property
    def pointer_size(self) -> int:
        return self._pointer_size

    def read(self, address: int, length: int) -> bytes:
        try:
            data = self._process.read_memory(address, length)
        except RuntimeError as exc:
            raise TargetUnavailableError(address, length, str(exc)) from exc
        if len(data) != length:
            raise TargetUnavailableError(
                address, length, f"short read ({len(data)} bytes)"
            )
        return data

    def read_word(self, address: int) -> int:
        try:
            return read_pointer(self._process, address)
        except (RuntimeError, struct.error) as exc:
            raise TargetUnavailableError(address, self._pointer_size, str(exc)) from exc

    def read_uint32(self, address: int) -> int:
        try:
            return read_uint32(self._process, address)
        except (RuntimeError, struct.error) as exc:
            raise TargetUnavailableError(address, 4, str(exc)) from exc

    def read_uint64(self, address: int) -> int:
        try:
            return read_uint64(self._process, address)
        except (RuntimeError, struct.error) as exc:
            raise TargetUnavailableError(address, 8, str(exc)) from exc

    def read_address_at(self, base: int, index: int) -> int:
        try:
            return read_pointer_at(self._process, base, index)
        except (RuntimeError, struct.error) as exc:
            raise TargetUnavailableError(
                base + index * self._pointer_size, self._pointer_size, str(exc)
            ) from exc
