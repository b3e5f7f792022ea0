"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import date
from pathlib import Path

import pytest

# Keep tests away from the real data directory
os.environ.setdefault("CALENDAR_STORAGE_BACKEND", "memory")

# Add src and fixture helpers to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent / "fixtures"))

from core.storage import MemoryMedium
from generate_events import generate_store
from models.events import Event
from services.calendar import CalendarSession
from services.event_store import EventStore
from services.persistence import PersistenceBridge


@pytest.fixture
def make_event():
    """Factory for events with sensible defaults."""

    def _make(start_time="09:00", end_time="10:00", name="Meeting", **kwargs):
        return Event(name=name, start_time=start_time, end_time=end_time, **kwargs)

    return _make


@pytest.fixture
def store():
    return EventStore()


@pytest.fixture
def medium():
    return MemoryMedium()


@pytest.fixture
def bridge(medium):
    return PersistenceBridge(medium)


@pytest.fixture
def session(bridge):
    """Session showing October 2026 with 17 October as today."""
    return CalendarSession(bridge, today=date(2026, 10, 17))


@pytest.fixture
def populated_store():
    """A month of generated, non-overlapping events."""
    return generate_store(2026, 10, seed=42)
