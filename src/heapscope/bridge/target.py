"""Pythonic wrapper around LLDB's SBTarget."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

try:
    import lldb
except ImportError:
    lldb = None  # type: ignore[assignment]

from .types import SymbolInfo, TypeMember

logger = logging.getLogger(__name__)


class Target:
    """High-level wrapper around ``lldb.SBTarget``.

    Exposes the symbolic side of an inspection: address size, symbol
    lookup and type layouts taken from the target's debug information.
    """

    def __init__(self, sb_target: Any) -> None:
        self._sb = sb_target

    # -- properties --------------------------------------------------------

    @property
    def path(self) -> str:
        """Return the file path of the target executable."""
        exe = self._sb.GetExecutable()
        if exe and exe.IsValid():
            return str(exe)
        return ""

    @property
    def address_byte_size(self) -> int:
        """Return the pointer size of the target architecture in bytes."""
        return self._sb.GetAddressByteSize() or 8

    # -- symbols -----------------------------------------------------------

    def find_symbols(self, name: str) -> List[SymbolInfo]:
        """Search for symbols by name.

        Symbols without a valid load address are skipped.
        """
        sc_list = self._sb.FindSymbols(name)
        results: List[SymbolInfo] = []
        for i in range(sc_list.GetSize()):
            sc = sc_list.GetContextAtIndex(i)
            sym = sc.GetSymbol()
            if not sym.IsValid():
                continue
            addr = sym.GetStartAddress().GetLoadAddress(self._sb)
            if addr == lldb.LLDB_INVALID_ADDRESS:
                continue
            mod = sc.GetModule()
            mod_name = (
                mod.GetFileSpec().GetFilename() if mod.IsValid() else ""
            )
            results.append(
                SymbolInfo(name=sym.GetName() or name, address=addr, module=mod_name or "")
            )
        return results

    def find_global_address(self, name: str) -> Optional[int]:
        """Return the load address of the global or static member *name*.

        Debug-info variables are tried first, then the plain symbol table.
        Returns ``None`` when nothing matches.
        """
        value = self._sb.FindFirstGlobalVariable(name)
        if value and value.IsValid():
            addr = value.GetLoadAddress()
            if addr != lldb.LLDB_INVALID_ADDRESS:
                return addr
        symbols = self.find_symbols(name)
        if symbols:
            return symbols[0].address
        return None

    # -- types -------------------------------------------------------------

    def lookup_type_fields(self, name: str) -> Dict[str, TypeMember]:
        """Flatten the data members of type *name* into a name -> member map.

        Members inherited from base classes are included with the base-class
        offset folded in; a member declared in a derived class shadows a
        base-class member of the same name.

        Raises
        ------
        RuntimeError
            If the type is not present in the target's debug information.
        """
        sb_type = self._sb.FindFirstType(name)
        if not sb_type or not sb_type.IsValid():
            raise RuntimeError(f"Type '{name}' not found in debug information")
        members: Dict[str, TypeMember] = {}
        self._collect_members(sb_type, 0, members)
        logger.debug("Type %s: %d fields", name, len(members))
        return members

    def _collect_members(
        self, sb_type: Any, base_offset: int, out: Dict[str, TypeMember]
    ) -> None:
        for i in range(sb_type.GetNumberOfDirectBaseClasses()):
            base = sb_type.GetDirectBaseClassAtIndex(i)
            self._collect_members(
                base.GetType(), base_offset + base.GetOffsetInBytes(), out
            )
        for i in range(sb_type.GetNumberOfFields()):
            field = sb_type.GetFieldAtIndex(i)
            field_name = field.GetName()
            if not field_name:
                continue
            field_type = field.GetType()
            out[field_name] = TypeMember(
                name=field_name,
                offset=base_offset + field.GetOffsetInBytes(),
                type_name=field_type.GetName() if field_type else None,
                size=field_type.GetByteSize() if field_type else None,
            )
