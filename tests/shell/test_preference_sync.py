"""Tests for the PreferenceSynchronizer.

Uses the in-memory profile store; no external services.
"""

from unittest.mock import MagicMock

import pytest

from src.core.geo import Coordinate
from src.core.preferences import SelectionSnapshot
from src.preferences import PreferenceSynchronizer
from src.shell.profile_store import InMemoryProfileStore


@pytest.fixture
def stored_record():
    """Profile previously saved by the user."""
    return {
        "name": "Nguyễn Văn A",
        "phone_number": "0912345678",
        "radius_km": 10,
        "province_code": "01",
        "province_name": "Hà Nội",
        "ward_code": "0105",
        "ward_name": "Phường Đông Anh",
        "location": {"latitude": 21.12, "longitude": 105.56},
    }


class TestLoad:
    """Tests for PreferenceSynchronizer.load()."""

    def test_nothing_stored(self):
        sync = PreferenceSynchronizer(InMemoryProfileStore())
        assert sync.load() is None

    def test_reads_stored_profile(self, stored_record):
        sync = PreferenceSynchronizer(InMemoryProfileStore(stored_record))
        profile = sync.load()
        assert profile.province_code == "01"
        assert profile.radius_km == 10.0

    def test_saved_location(self, stored_record):
        sync = PreferenceSynchronizer(InMemoryProfileStore(stored_record))
        assert sync.saved_location() == Coordinate(21.12, 105.56)

    def test_saved_location_without_profile(self):
        assert PreferenceSynchronizer(InMemoryProfileStore()).saved_location() is None


class TestSave:
    """Tests for PreferenceSynchronizer.save()."""

    def test_first_save_writes_with_default_radius(self):
        store = InMemoryProfileStore()
        sync = PreferenceSynchronizer(store)

        assert sync.save(SelectionSnapshot(province_code="01", province_name="Hà Nội")) is True

        record = store.load()
        assert record["province_code"] == "01"
        assert record["province_name"] == "Hà Nội"
        assert record["radius_km"] == 5.0

    def test_configured_default_radius(self):
        store = InMemoryProfileStore()
        PreferenceSynchronizer(store, default_radius_km=3.0).save(SelectionSnapshot())
        assert store.load()["radius_km"] == 3.0

    def test_unchanged_selection_skips_write(self, stored_record):
        store = InMemoryProfileStore(stored_record)
        sync = PreferenceSynchronizer(store)

        snapshot = SelectionSnapshot("01", "Hà Nội", "0105", "Phường Đông Anh", 10.0)
        assert sync.save(snapshot) is False
        assert store.save_count == 0

    def test_repeated_save_writes_once(self):
        store = InMemoryProfileStore()
        sync = PreferenceSynchronizer(store)
        snapshot = SelectionSnapshot("01", "Hà Nội", None, None, 5.0)

        sync.save(snapshot)
        sync.save(snapshot)
        sync.save(snapshot)

        assert store.save_count == 1

    def test_keeps_fields_outside_selection(self, stored_record):
        store = InMemoryProfileStore(stored_record)
        sync = PreferenceSynchronizer(store)

        sync.save(SelectionSnapshot("79", "TP. Hồ Chí Minh", None, None, 10.0))

        record = store.load()
        assert record["province_code"] == "79"
        assert record["ward_code"] is None
        assert record["name"] == "Nguyễn Văn A"
        assert record["phone_number"] == "0912345678"
        assert record["location"] == {"latitude": 21.12, "longitude": 105.56}

    def test_missing_radius_keeps_stored_radius(self, stored_record):
        store = InMemoryProfileStore(stored_record)
        sync = PreferenceSynchronizer(store)

        sync.save(SelectionSnapshot("02", None, None, None, None))

        assert store.load()["radius_km"] == 10.0

    def test_reads_browser_client_record(self):
        """Stores written with camelCase keys are merged correctly."""
        store = InMemoryProfileStore({"provinceCode": "01", "radius": 20, "name": "A"})
        sync = PreferenceSynchronizer(store)

        assert sync.save(SelectionSnapshot("01", None, None, None, 20.0)) is False
        assert sync.save(SelectionSnapshot("01", None, "0105", None, 20.0)) is True

        record = store.load()
        assert record["ward_code"] == "0105"
        assert record["radius_km"] == 20.0
        assert record["name"] == "A"


class TestUpdateLocation:
    """Tests for PreferenceSynchronizer.update_location()."""

    def test_persists_location_and_keeps_selection(self, stored_record):
        store = InMemoryProfileStore(stored_record)
        sync = PreferenceSynchronizer(store)

        assert sync.update_location(Coordinate(10.77, 106.70)) is True

        record = store.load()
        assert record["location"] == {"latitude": 10.77, "longitude": 106.70}
        assert record["province_code"] == "01"
        assert record["radius_km"] == 10.0

    def test_location_on_empty_store(self):
        store = InMemoryProfileStore()
        PreferenceSynchronizer(store).update_location(Coordinate(1.0, 2.0))
        assert store.load()["radius_km"] == 5.0


class TestProfileCache:
    """The stored profile is read once and kept current by writes."""

    def test_store_read_once(self, stored_record):
        store = InMemoryProfileStore(stored_record)
        store.load = MagicMock(wraps=store.load)
        sync = PreferenceSynchronizer(store)

        sync.load()
        sync.saved_location()
        sync.save(SelectionSnapshot("02", None, None, None, 10.0))
        sync.saved_location()

        assert store.load.call_count == 1

    def test_cache_follows_writes(self):
        sync = PreferenceSynchronizer(InMemoryProfileStore())

        sync.update_location(Coordinate(10.77, 106.70))

        assert sync.saved_location() == Coordinate(10.77, 106.70)

    def test_failed_write_leaves_cache_unchanged(self, stored_record):
        store = InMemoryProfileStore(stored_record)
        store.save = MagicMock(return_value=False)
        sync = PreferenceSynchronizer(store)

        assert sync.save(SelectionSnapshot("79", None, None, None, 10.0)) is False

        assert sync.load().province_code == "01"
