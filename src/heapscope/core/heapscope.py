"""Heapscope — top-level orchestrator."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from heapscope.core.access import LLDBTypeResolver, ProcessMemoryReader
from heapscope.core.heap import HeapDescriptor
from heapscope.core.report import Reporter
from heapscope.core.session import AttachSession
from heapscope.core.types.config import HeapscopeConfig, load_config
from heapscope.core.types.heap import HeapReport
from heapscope.core.walker import HeapWalker, RegionFilter, RegionVisitor

logger = logging.getLogger(__name__)


class Heapscope:
    """Attach to a target and inspect its collector heap.

    Usage:
        with Heapscope() as scope:
            scope.attach(12345)
            print(scope.reporter.format_summary())
            scope.iterate(lambda region: print(region.index))

    Every attach creates a fresh :class:`AttachSession`; the previous one is
    detached first.
    """

    def __init__(
        self,
        config: Optional[HeapscopeConfig] = None,
        config_path: Optional[str] = None,
    ):
        if config is not None:
            self.config = config
        else:
            self.config = load_config(config_path)

        if self.config.verbose:
            logging.basicConfig(level=logging.DEBUG)

        self._debugger = None
        self._target = None
        self._process = None
        self._is_core = False
        self._session: Optional[AttachSession] = None
        self._heap: Optional[HeapDescriptor] = None

    # -- attach ------------------------------------------------------------

    def _get_debugger(self):
        if self._debugger is None:
            from heapscope.bridge import Debugger

            self._debugger = Debugger()
        return self._debugger

    def attach(self, pid: int, heap_address: Optional[int] = None) -> None:
        """Attach to a running process by PID."""
        self._open(self._get_debugger().attach(pid), heap_address, is_core=False)

    def attach_by_name(self, name: str, heap_address: Optional[int] = None) -> None:
        """Attach to a running process by name."""
        self._open(self._get_debugger().attach_by_name(name), heap_address, is_core=False)

    def load_core(
        self, executable: str, core_path: str, heap_address: Optional[int] = None
    ) -> None:
        """Inspect a core image produced by *executable*."""
        self._open(
            self._get_debugger().load_core(executable, core_path),
            heap_address,
            is_core=True,
        )

    def _open(self, opened: Tuple, heap_address: Optional[int], is_core: bool) -> None:
        self.detach()
        target, process = opened
        self._target, self._process, self._is_core = target, process, is_core
        logger.info(
            "Inspecting %s (%d-byte pointers%s)",
            target.path or "<unknown executable>",
            target.address_byte_size,
            ", core image" if is_core else "",
        )
        if not is_core and not process.is_paused:
            logger.warning("Process %d is not stopped; results are best-effort", process.pid)

        session = AttachSession(ProcessMemoryReader(process), self.config, heap_address)
        session.resolve(LLDBTypeResolver(target))
        self._session = session
        self._heap = session.heap()

    # -- inspection --------------------------------------------------------

    @property
    def session(self) -> AttachSession:
        if self._session is None:
            raise RuntimeError("No session. Call attach() or load_core() first.")
        return self._session

    @property
    def heap(self) -> HeapDescriptor:
        if self._heap is None:
            raise RuntimeError("No session. Call attach() or load_core() first.")
        return self._heap

    @property
    def walker(self) -> HeapWalker:
        return HeapWalker(self.heap)

    @property
    def reporter(self) -> Reporter:
        return Reporter(self.heap, heap_name=self.config.heap_name)

    def iterate(
        self, visitor: RegionVisitor, region_filter: Optional[RegionFilter] = None
    ) -> None:
        """Visit regions in index order; live regions only by default."""
        self.walker.iterate(visitor, region_filter)

    def describe(self) -> HeapReport:
        return self.reporter.describe()

    # -- teardown ----------------------------------------------------------

    def detach(self) -> None:
        """Drop the current session and detach from a live process."""
        if self._session is not None:
            self._session.detach()
            self._session = None
            self._heap = None
        if self._process is not None and not self._is_core:
            self._process.detach()
        self._process = None
        self._target = None

    def end(self) -> None:
        """Detach and release the debugger."""
        self.detach()
        if self._debugger is not None:
            self._debugger.destroy()
            self._debugger = None
        logger.info("Heapscope ended")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.end()
