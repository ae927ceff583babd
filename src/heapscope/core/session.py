"""AttachSession — layout knowledge scoped to one attach.

Lifecycle: ``AttachSession(reader)`` → ``resolve(resolver)`` → readers →
``detach()``.  A new attach always gets a new session.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Optional

from heapscope.core.errors import HeapscopeError, SessionStateError
from heapscope.core.types.config import HeapscopeConfig
from heapscope.core.types.layout import HeapLayout, RegionLayout, pick_offsets

if TYPE_CHECKING:
    from heapscope.core.access import MemoryReader, TypeResolver
    from heapscope.core.heap import HeapDescriptor

logger = logging.getLogger(__name__)


class AttachSession:
    """Resolved offsets and the heap address for one inspected target.

    :meth:`resolve` runs its body exactly once, even when several threads
    enter it at the same time.  A failed resolution is remembered: every
    later call re-raises the same error and no reader can be obtained.
    """

    def __init__(
        self,
        reader: MemoryReader,
        config: Optional[HeapscopeConfig] = None,
        heap_address: Optional[int] = None,
    ) -> None:
        self.reader = reader
        self.config = config or HeapscopeConfig()
        self._heap_address = heap_address
        self._region_size_bytes: Optional[int] = None
        self._heap_layout: Optional[HeapLayout] = None
        self._region_layout: Optional[RegionLayout] = None

        self._lock = threading.Lock()
        self._resolved = False
        self._failure: Optional[HeapscopeError] = None
        self._detached = False

    # -- resolution --------------------------------------------------------

    def resolve(self, resolver: TypeResolver) -> None:
        """Resolve every offset the readers need from *resolver*.

        Raises
        ------
        MetadataMissingError
            If a required type, field or symbol is absent.
        SessionStateError
            If the session has been detached.
        """
        if self._detached:
            raise SessionStateError("Session is detached")
        if not self._resolved:
            with self._lock:
                if not self._resolved:
                    try:
                        self._resolve(resolver)
                    except HeapscopeError as exc:
                        logger.error("Layout resolution failed: %s", exc)
                        self._failure = exc
                    self._resolved = True
        if self._failure is not None:
            raise self._failure

    def _resolve(self, resolver: TypeResolver) -> None:
        names = self.config.layout

        heap_fields = resolver.lookup_type(names.heap_type)
        heap = pick_offsets(
            names.heap_type,
            heap_fields,
            {
                "num_regions": names.num_regions_field,
                "used": names.used_field,
                "committed": names.committed_field,
                "regions": names.regions_field,
                "reserved": names.reserved_field,
            },
        )
        mem_region = pick_offsets(
            names.mem_region_type,
            resolver.lookup_type(names.mem_region_type),
            {
                "start": names.mem_region_start_field,
                "word_size": names.mem_region_word_size_field,
            },
        )
        region = pick_offsets(
            names.region_type,
            resolver.lookup_type(names.region_type),
            {
                "state": names.region_state_field,
                "bottom": names.region_bottom_field,
                "end": names.region_end_field,
                "top": names.region_top_field,
            },
        )

        heap_layout = HeapLayout(
            num_regions=heap["num_regions"],
            used=heap["used"],
            committed=heap["committed"],
            regions=heap["regions"],
            reserved_start=heap["reserved"] + mem_region["start"],
            reserved_word_size=heap["reserved"] + mem_region["word_size"],
        )
        region_layout = RegionLayout(**region)

        heap_address = self._heap_address
        if heap_address is None:
            heap_address = self.reader.read_word(resolver.lookup_symbol(names.heap_symbol))
        region_size = names.region_size_bytes
        if region_size is None:
            region_size = self.reader.read_word(
                resolver.lookup_symbol(names.region_size_symbol)
            )

        self._heap_layout = heap_layout
        self._region_layout = region_layout
        self._heap_address = heap_address
        self._region_size_bytes = region_size
        logger.debug(
            "Resolved %s at %#x (layout v%d, region size %d)",
            names.heap_type,
            heap_address,
            heap_layout.version,
            region_size,
        )

    # -- state -------------------------------------------------------------

    @property
    def is_resolved(self) -> bool:
        """True once resolution succeeded and the session is still attached."""
        return self._resolved and self._failure is None and not self._detached

    def _require_resolved(self) -> None:
        if self._detached:
            raise SessionStateError("Session is detached")
        if not self._resolved:
            raise SessionStateError("Session is not resolved. Call resolve() first.")
        if self._failure is not None:
            raise SessionStateError(f"Session resolution failed: {self._failure}")

    @property
    def heap_layout(self) -> HeapLayout:
        self._require_resolved()
        return self._heap_layout  # type: ignore[return-value]

    @property
    def region_layout(self) -> RegionLayout:
        self._require_resolved()
        return self._region_layout  # type: ignore[return-value]

    @property
    def heap_address(self) -> int:
        self._require_resolved()
        return self._heap_address  # type: ignore[return-value]

    @property
    def region_size_bytes(self) -> int:
        self._require_resolved()
        return self._region_size_bytes  # type: ignore[return-value]

    def heap(self) -> HeapDescriptor:
        """Return a :class:`HeapDescriptor` bound to this session."""
        from heapscope.core.heap import HeapDescriptor

        return HeapDescriptor(self)

    def detach(self) -> None:
        """Invalidate the session; descriptors bound to it stop reading."""
        self._detached = True
        self._heap_layout = None
        self._region_layout = None
        logger.info("Session detached")
