"""Core test fixtures — in-memory heap images."""

from __future__ import annotations

import pytest

from heap_fixtures import REGULAR, TRASH, HeapImage


@pytest.fixture()
def heap_image():
    """Factory for :class:`HeapImage` instances."""
    return HeapImage


@pytest.fixture()
def live_heap():
    """Four regions: live, live, trash, live."""
    return HeapImage([REGULAR, REGULAR, TRASH, REGULAR])
