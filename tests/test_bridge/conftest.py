"""Bridge test fixtures — mock SB objects for each LLDB class."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _sb_error(success: bool = True) -> MagicMock:
    err = MagicMock()
    err.Success.return_value = success
    err.Fail.return_value = not success
    err.__str__ = lambda self: "" if success else "mock error"
    err.__bool__ = lambda self: True  # SBError is truthy
    return err


def make_sb_member(name, offset, type_name="size_t", size=8):
    """Build a mock SBTypeMember."""
    member = MagicMock()
    member.GetName.return_value = name
    member.GetOffsetInBytes.return_value = offset
    member_type = MagicMock()
    member_type.GetName.return_value = type_name
    member_type.GetByteSize.return_value = size
    member.GetType.return_value = member_type
    return member


def make_sb_type(fields, bases=()):
    """Build a mock SBType from ``[(name, offset)]`` and ``[(sb_type, offset)]``."""
    sb_type = MagicMock()
    sb_type.IsValid.return_value = True
    members = [make_sb_member(name, offset) for name, offset in fields]
    sb_type.GetNumberOfFields.return_value = len(members)
    sb_type.GetFieldAtIndex.side_effect = lambda i: members[i]

    base_members = []
    for base_type, offset in bases:
        base = MagicMock()
        base.GetOffsetInBytes.return_value = offset
        base.GetType.return_value = base_type
        base_members.append(base)
    sb_type.GetNumberOfDirectBaseClasses.return_value = len(base_members)
    sb_type.GetDirectBaseClassAtIndex.side_effect = lambda i: base_members[i]
    return sb_type


@pytest.fixture()
def sb_type_factory():
    return make_sb_type


# ---------------------------------------------------------------------------
# SBDebugger
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_sb_debugger():
    sb = MagicMock(name="SBDebugger")
    return sb


# ---------------------------------------------------------------------------
# SBTarget
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_sb_target():
    sb = MagicMock(name="SBTarget")

    exe = MagicMock()
    exe.IsValid.return_value = True
    exe.__str__ = lambda self: "/usr/lib/jvm/bin/java"
    sb.GetExecutable.return_value = exe

    sb.GetAddressByteSize.return_value = 8

    sc_list = MagicMock()
    sc_list.GetSize.return_value = 0
    sb.FindSymbols.return_value = sc_list

    missing = MagicMock()
    missing.IsValid.return_value = False
    sb.FindFirstGlobalVariable.return_value = missing

    return sb


# ---------------------------------------------------------------------------
# SBProcess
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_sb_process(mock_sb_target):
    sb = MagicMock(name="SBProcess")
    sb.GetState.return_value = 5  # eStateStopped
    sb.GetProcessID.return_value = 12345
    sb.GetTarget.return_value = mock_sb_target
    sb.Detach.return_value = _sb_error(True)
    sb.ReadMemory.return_value = b"\x41\x42\x43\x44"
    return sb


# ---------------------------------------------------------------------------
# Convenience: error fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_sb_error_success():
    return _sb_error(True)


@pytest.fixture()
def mock_sb_error_fail():
    return _sb_error(False)
