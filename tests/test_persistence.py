"""Tests for loading and saving the store through a key-value medium."""

import json
import logging

import pytest

from core.config import STORAGE_KEY
from core.exceptions import PersistenceReadError, PersistenceWriteError
from core.storage import FileMedium, MemoryMedium
from services.event_store import EventStore
from services.persistence import PersistenceBridge, serialize_store

DATE_KEY = "2026-10-17"


class BrokenMedium:
    """Medium whose every operation fails."""

    def get(self, key):
        raise OSError("storage unavailable")

    def set(self, key, value):
        raise OSError("disk full")

    def remove(self, key):
        raise OSError("storage unavailable")


class TestLoad:
    def test_absent_value_loads_empty(self, bridge):
        assert bridge.load() == EventStore()

    def test_round_trip(self, bridge, populated_store):
        assert bridge.save(populated_store) is True
        assert bridge.load() == populated_store

    def test_round_trip_through_files(self, tmp_path, populated_store):
        bridge = PersistenceBridge(FileMedium(tmp_path))
        bridge.save(populated_store)

        reloaded = PersistenceBridge(FileMedium(tmp_path)).load()
        assert reloaded == populated_store
        assert reloaded.to_dict() == populated_store.to_dict()

    def test_legacy_records_without_ids(self, medium, bridge):
        medium.set(
            STORAGE_KEY,
            json.dumps(
                {
                    DATE_KEY: [
                        {
                            "name": "Standup",
                            "startTime": "09:00",
                            "endTime": "09:15",
                            "description": "",
                            "color": "#1a73e8",
                        }
                    ]
                }
            ),
        )

        store = bridge.load()
        events = store.query(DATE_KEY)
        assert [e.name for e in events] == ["Standup"]
        assert events[0].id

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "null",
            "[]",
        ],
    )
    def test_corrupt_payload_loads_empty(self, medium, bridge, caplog, payload):
        medium.set(STORAGE_KEY, payload)

        with caplog.at_level(logging.WARNING, logger="services.persistence"):
            store = bridge.load()

        assert store == EventStore()
        assert bridge.load_failed is True
        assert "Error loading events" in caplog.text

    def test_corrupt_payload_is_backed_up(self, medium, bridge):
        medium.set(STORAGE_KEY, "{corrupt")
        bridge.load()

        assert medium.get(bridge.backup_key) == "{corrupt"
        assert bridge.backup_key == STORAGE_KEY + ".unreadable"

    def test_invalid_records_are_skipped(self, medium, bridge):
        payload = json.dumps(
            {
                "2026-10-01": [{"name": "", "startTime": "09:00", "endTime": "10:00"}],
                "2026-10-02": "x",
                "2026-10-03": [{"name": "Dentist", "startTime": "14:00", "endTime": "15:00"}],
            }
        )
        medium.set(STORAGE_KEY, payload)

        store = bridge.load()

        assert bridge.load_failed is False
        assert [e.name for e in store.query("2026-10-03")] == ["Dentist"]
        assert store.skipped == 2
        assert medium.get(bridge.backup_key) == payload

    def test_clean_load_makes_no_backup(self, medium, bridge, populated_store):
        bridge.save(populated_store)
        bridge.load()

        assert bridge.load_failed is False
        assert medium.get(bridge.backup_key) is None

    def test_failed_backup_is_logged(self, caplog):
        medium = MemoryMedium()
        medium.set(STORAGE_KEY, "not json")
        medium.max_bytes = 4
        bridge = PersistenceBridge(medium)

        with caplog.at_level(logging.ERROR, logger="services.persistence"):
            assert bridge.load() == EventStore()

        assert "Could not back up" in caplog.text

    def test_unreadable_medium_loads_empty(self):
        bridge = PersistenceBridge(BrokenMedium())
        assert bridge.load() == EventStore()
        assert bridge.load_failed is True

    def test_read_raises_for_corrupt_payload(self, medium, bridge):
        medium.set(STORAGE_KEY, "{oops")
        with pytest.raises(PersistenceReadError):
            bridge.read()


class TestSave:
    def test_serialized_form_is_compact_json(self, store, make_event):
        store.add(DATE_KEY, make_event())
        payload = serialize_store(store)

        assert ", " not in payload
        assert ": " not in payload
        assert json.loads(payload) == store.to_dict()

    def test_quota_exceeded_is_swallowed(self, store, make_event, caplog):
        store.add(DATE_KEY, make_event())
        bridge = PersistenceBridge(MemoryMedium(max_bytes=10))

        with caplog.at_level(logging.ERROR, logger="services.persistence"):
            assert bridge.save(store) is False

        assert "Error saving events" in caplog.text
        assert len(store) == 1

    def test_write_failure_is_swallowed(self, store):
        assert PersistenceBridge(BrokenMedium()).save(store) is False

    def test_write_raises_for_strict_callers(self, store):
        with pytest.raises(PersistenceWriteError):
            PersistenceBridge(BrokenMedium()).write(store)

    def test_custom_key(self, medium, store, make_event):
        store.add(DATE_KEY, make_event())
        PersistenceBridge(medium, key="otherCalendar").save(store)

        assert medium.get(STORAGE_KEY) is None
        assert medium.get("otherCalendar") is not None
