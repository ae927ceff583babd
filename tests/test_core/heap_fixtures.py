"""In-memory heap image behind the access protocols, shared by core tests."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Set

from heapscope.core.errors import MetadataMissingError, TargetUnavailableError
from heapscope.core.session import AttachSession

WORD = 8
MiB = 1024 * 1024

HEAP_SYMBOL = 0x5000
REGION_SIZE_SYMBOL = 0x5008
HEAP_OBJECT = 0x10000
REGION_TABLE = 0x20000
REGION_OBJECTS = 0x30000
REGION_OBJECT_STRIDE = 0x100
HEAP_BASE = 0x7F0000000000

# Raw state codes (collector defaults).
EMPTY_UNCOMMITTED = 0
EMPTY_COMMITTED = 1
REGULAR = 2
HUMONGOUS_START = 3
CSET = 6
TRASH = 9

HEAP_FIELDS = {
    "_reserved": 0x10,
    "_num_regions": 0x100,
    "_used": 0x108,
    "_committed": 0x110,
    "_regions": 0x118,
}
MEM_REGION_FIELDS = {"_start": 0x0, "_word_size": 0x8}
REGION_FIELDS = {"_bottom": 0x08, "_end": 0x10, "_top": 0x18, "_state": 0x40}


class FakeResolver:
    """TypeResolver over fixed dictionaries; counts lookups."""

    def __init__(self, types: Mapping[str, Mapping[str, int]], symbols: Mapping[str, int]):
        self.types = {name: dict(fields) for name, fields in types.items()}
        self.symbols = dict(symbols)
        self.type_lookups = 0

    def lookup_type(self, name: str) -> Mapping[str, int]:
        self.type_lookups += 1
        if name not in self.types:
            raise MetadataMissingError(name)
        return self.types[name]

    def lookup_symbol(self, name: str) -> int:
        if name not in self.symbols:
            raise MetadataMissingError(name)
        return self.symbols[name]


class FakeMemory:
    """MemoryReader over a sparse word map; unmapped reads fail."""

    pointer_size = WORD

    def __init__(self) -> None:
        self.words: Dict[int, int] = {}
        self.u32: Dict[int, int] = {}
        self.unreadable: Set[int] = set()
        self.reads = 0

    def _check(self, address: int, length: int) -> None:
        self.reads += 1
        if address in self.unreadable:
            raise TargetUnavailableError(address, length, "target gone")

    def read(self, address: int, length: int) -> bytes:
        return self.read_word(address).to_bytes(WORD, "little")[:length]

    def read_word(self, address: int) -> int:
        self._check(address, WORD)
        if address not in self.words:
            raise TargetUnavailableError(address, WORD, "unmapped")
        return self.words[address]

    def read_uint32(self, address: int) -> int:
        self._check(address, 4)
        if address not in self.u32:
            raise TargetUnavailableError(address, 4, "unmapped")
        return self.u32[address]

    def read_uint64(self, address: int) -> int:
        return self.read_word(address)

    def read_address_at(self, base: int, index: int) -> int:
        return self.read_word(base + index * WORD)


class HeapImage:
    """A Shenandoah-shaped heap laid out in a :class:`FakeMemory`."""

    def __init__(
        self,
        states: Iterable[int],
        used: Optional[int] = None,
        committed: Optional[int] = None,
        region_size: int = MiB,
        num_regions: Optional[int] = None,
    ) -> None:
        self.states = list(states)
        self.region_size = region_size
        self.memory = FakeMemory()
        self.resolver = FakeResolver(
            {
                "ShenandoahHeap": HEAP_FIELDS,
                "MemRegion": MEM_REGION_FIELDS,
                "ShenandoahHeapRegion": REGION_FIELDS,
            },
            {
                "Universe::_collectedHeap": HEAP_SYMBOL,
                "ShenandoahHeapRegion::RegionSizeBytes": REGION_SIZE_SYMBOL,
            },
        )

        count = len(self.states) if num_regions is None else num_regions
        reserved = count * region_size
        words = self.memory.words
        words[HEAP_SYMBOL] = HEAP_OBJECT
        words[REGION_SIZE_SYMBOL] = region_size
        words[HEAP_OBJECT + HEAP_FIELDS["_reserved"]] = HEAP_BASE
        words[HEAP_OBJECT + HEAP_FIELDS["_reserved"] + 8] = reserved // WORD
        words[HEAP_OBJECT + HEAP_FIELDS["_num_regions"]] = count
        words[HEAP_OBJECT + HEAP_FIELDS["_used"]] = 0 if used is None else used
        words[HEAP_OBJECT + HEAP_FIELDS["_committed"]] = reserved if committed is None else committed
        words[HEAP_OBJECT + HEAP_FIELDS["_regions"]] = REGION_TABLE

        for index, state in enumerate(self.states):
            obj = self.region_object(index)
            bottom = HEAP_BASE + index * region_size
            words[REGION_TABLE + index * WORD] = obj
            words[obj + REGION_FIELDS["_bottom"]] = bottom
            words[obj + REGION_FIELDS["_end"]] = bottom + region_size
            words[obj + REGION_FIELDS["_top"]] = bottom + (region_size // 2 if state > 1 else 0)
            self.memory.u32[obj + REGION_FIELDS["_state"]] = state

    @staticmethod
    def region_object(index: int) -> int:
        return REGION_OBJECTS + index * REGION_OBJECT_STRIDE

    def fail_region(self, index: int) -> None:
        """Make the table slot of region *index* unreadable."""
        self.memory.unreadable.add(REGION_TABLE + index * WORD)

    def set_word(self, field: str, value: int) -> None:
        self.memory.words[HEAP_OBJECT + HEAP_FIELDS[field]] = value

    def session(self, config=None) -> AttachSession:
        session = AttachSession(self.memory, config)
        session.resolve(self.resolver)
        return session
