"""Pythonic wrapper around LLDB's SBProcess, restricted to inspection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

try:
    import lldb
except ImportError:
    lldb = None  # type: ignore[assignment]

from .types import ProcessState

if TYPE_CHECKING:
    from .target import Target

# Map LLDB integer state constants to our ProcessState enum.
_STATE_MAP: Dict[int, ProcessState] = {}


def _build_state_map() -> None:
    """Populate ``_STATE_MAP`` lazily once LLDB is available."""
    if _STATE_MAP or lldb is None:
        return
    _STATE_MAP.update(
        {
            lldb.eStateInvalid: ProcessState.INVALID,
            lldb.eStateUnloaded: ProcessState.UNLOADED,
            lldb.eStateConnected: ProcessState.CONNECTED,
            lldb.eStateAttaching: ProcessState.ATTACHING,
            lldb.eStateLaunching: ProcessState.LAUNCHING,
            lldb.eStateStopped: ProcessState.STOPPED,
            lldb.eStateRunning: ProcessState.RUNNING,
            lldb.eStateStepping: ProcessState.STEPPING,
            lldb.eStateCrashed: ProcessState.CRASHED,
            lldb.eStateDetached: ProcessState.DETACHED,
            lldb.eStateExited: ProcessState.EXITED,
            lldb.eStateSuspended: ProcessState.SUSPENDED,
        }
    )


class Process:
    """High-level wrapper around ``lldb.SBProcess``.

    Only the operations needed to inspect a paused process or a core image
    are exposed: state queries, detaching and reading memory.
    """

    def __init__(self, sb_process: Any, target: Target) -> None:
        self._sb = sb_process
        self._target = target
        _build_state_map()

    # -- properties --------------------------------------------------------

    @property
    def target(self) -> Target:
        """Return the :class:`Target` this process belongs to."""
        return self._target

    @property
    def state(self) -> ProcessState:
        """Return the current process state as a :class:`ProcessState`."""
        raw = self._sb.GetState()
        return _STATE_MAP.get(raw, ProcessState.INVALID)

    @property
    def pid(self) -> int:
        """Return the process ID (0 for most core images)."""
        return self._sb.GetProcessID()

    @property
    def is_paused(self) -> bool:
        """True when memory reflects a stable snapshot.

        A stopped or crashed live process, or a loaded core image, counts as
        paused.
        """
        return self.state in (ProcessState.STOPPED, ProcessState.CRASHED)

    # -- lifecycle ---------------------------------------------------------

    def detach(self) -> None:
        """Detach from the process, leaving it running."""
        error = self._sb.Detach()
        if error and not error.Success():
            raise RuntimeError(f"Failed to detach: {error}")

    # -- memory ------------------------------------------------------------

    def read_memory(self, address: int, size: int) -> bytes:
        """Read *size* bytes from the process address space.

        Raises
        ------
        RuntimeError
            If the range is unmapped or the process is gone.
        """
        error = lldb.SBError()
        data = self._sb.ReadMemory(address, size, error)
        if error.Fail():
            raise RuntimeError(
                f"Failed to read {size} bytes at {address:#x}: {error}"
            )
        return bytes(data)
