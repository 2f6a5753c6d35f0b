"""Shared pytest fixtures for slab mover tests."""

import pytest

from mc_slab_mover.slab_types import Snapshot
from tests.utils.fake_memcached import RecordingSink


@pytest.fixture
def recording_sink():
    """A command sink that records every reassign call."""
    return RecordingSink()


@pytest.fixture
def before_snapshot():
    """Baseline snapshot of three slab classes."""
    return Snapshot(
        {
            1: {"evicted": 100, "number": 50, "total_pages": 10, "get_hits": 7},
            2: {"evicted": 10, "number": 20, "total_pages": 5, "slab_state": "idle"},
            3: {"evicted": 0, "number": 5, "total_pages": 2},
        },
        captured_at=1000.0,
    )


@pytest.fixture
def after_snapshot():
    """Second snapshot: slab 3 vanished, slab 4 appeared."""
    return Snapshot(
        {
            1: {"evicted": 130, "number": 55, "total_pages": 10, "get_hits": 19},
            2: {"evicted": 12, "number": 18, "total_pages": 5, "slab_state": "busy"},
            4: {"evicted": 3, "number": 1, "total_pages": 1},
        },
        captured_at=1010.0,
    )
