"""Pythonic wrapper around LLDB's SBDebugger."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Tuple

try:
    import lldb
except ImportError:
    lldb = None  # type: ignore[assignment]

if TYPE_CHECKING:
    from .process import Process
    from .target import Target

logger = logging.getLogger(__name__)


def _require_lldb() -> None:
    """Raise a clear error when LLDB is not available."""
    if lldb is None:
        raise RuntimeError(
            "The 'lldb' Python module is not available. "
            "Ensure LLDB is installed and its Python bindings are on your PYTHONPATH "
            "(for example PYTHONPATH=\"$(lldb -P)\")."
        )


class Debugger:
    """High-level wrapper around ``lldb.SBDebugger``.

    Usage::

        with Debugger() as dbg:
            target, process = dbg.attach(12345)
    """

    def __init__(self) -> None:
        _require_lldb()
        lldb.SBDebugger.Initialize()
        self._sb = lldb.SBDebugger.Create()
        self._sb.SetAsync(False)

    # -- context manager ---------------------------------------------------

    def __enter__(self) -> Debugger:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.destroy()

    # -- public API --------------------------------------------------------

    def create_target(self, path: str) -> Target:
        """Create a target from an executable path.

        Raises
        ------
        RuntimeError
            If LLDB fails to create the target.
        """
        from .target import Target

        sb_target = self._sb.CreateTarget(path)
        if not sb_target or not sb_target.IsValid():
            raise RuntimeError(f"Failed to create target for '{path}'")
        return Target(sb_target)

    def attach(self, pid: int) -> Tuple[Target, Process]:
        """Attach to a running process by PID.

        In synchronous mode LLDB stops the process on attach, so the returned
        process is already paused.
        """
        from .process import Process
        from .target import Target

        error = lldb.SBError()
        sb_target = self._sb.CreateTarget("")
        if not sb_target or not sb_target.IsValid():
            raise RuntimeError("Failed to create empty target for attach")

        sb_process = sb_target.AttachToProcessWithID(
            self._sb.GetListener(), pid, error
        )
        if error.Fail():
            raise RuntimeError(f"Failed to attach to PID {pid}: {error}")

        logger.info("Attached to pid=%d", pid)
        target = Target(sb_target)
        return target, Process(sb_process, target)

    def attach_by_name(self, name: str) -> Tuple[Target, Process]:
        """Attach to a running process by name."""
        from .process import Process
        from .target import Target

        error = lldb.SBError()
        sb_target = self._sb.CreateTarget("")
        if not sb_target or not sb_target.IsValid():
            raise RuntimeError("Failed to create empty target for attach")

        sb_process = sb_target.AttachToProcessWithName(
            self._sb.GetListener(), name, False, error
        )
        if error.Fail():
            raise RuntimeError(f"Failed to attach to process '{name}': {error}")

        logger.info("Attached to %s", name)
        target = Target(sb_target)
        return target, Process(sb_process, target)

    def load_core(self, executable: str, core_path: str) -> Tuple[Target, Process]:
        """Open a core image of *executable* for offline inspection.

        Parameters
        ----------
        executable:
            The binary that produced the core (supplies the debug info).
        core_path:
            Path to the core file.
        """
        from .process import Process

        target = self.create_target(executable)
        sb_process = target._sb.LoadCore(core_path)
        if not sb_process or not sb_process.IsValid():
            raise RuntimeError(f"Failed to load core file '{core_path}'")

        logger.info("Loaded core %s for %s", core_path, executable)
        return target, Process(sb_process, target)

    def destroy(self) -> None:
        """Destroy the underlying debugger instance and release resources."""
        if self._sb is not None:
            lldb.SBDebugger.Destroy(self._sb)
            self._sb = None  # type: ignore[assignment]
