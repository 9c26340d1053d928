"""
Tests for key-value storage and snapshot serialization.

Goal: writes are durable across store instances, and failures surface as
StorageUnavailable so GuardedStore can degrade instead of crashing.
"""

import json
import os
import tempfile

import pytest

from standup.core.canonical import canonical_json_str, pretty_json_str
from standup.core.errors import StorageUnavailable
from standup.store import FileStore, GuardedStore, MemoryStore


def test_file_store_round_trip_across_instances():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "nested", "store.json")
        store = FileStore(path)

        assert store.get("missing") is None
        store.set("scrumTimerEnd", "123")
        store.set("scrumUsers", "[]")

        reopened = FileStore(path)
        assert reopened.get("scrumTimerEnd") == "123"

        reopened.remove("scrumTimerEnd")
        reopened.remove("scrumTimerEnd")
        assert store.get("scrumTimerEnd") is None

        with open(path, "r") as f:
            assert json.load(f) == {"scrumUsers": "[]"}


def test_file_store_corrupt_file_raises_storage_unavailable():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "store.json")
        with open(path, "w") as f:
            f.write("[1, 2")

        with pytest.raises(StorageUnavailable):
            FileStore(path).get("scrumUsers")


def test_file_store_write_recovers_from_corrupt_file():
    """A truncated file is moved aside on the next write instead of blocking it forever."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "store.json")
        with open(path, "w") as f:
            f.write("{trunc")
        store = FileStore(path)

        store.set("scrumUsers", "[]")

        assert store.get("scrumUsers") == "[]"
        with open(f"{path}.corrupt", "r") as f:
            assert f.read() == "{trunc"


def test_file_store_unwritable_location_raises_storage_unavailable():
    with tempfile.TemporaryDirectory() as tmpdir:
        blocker = os.path.join(tmpdir, "not-a-dir")
        with open(blocker, "w") as f:
            f.write("")

        with pytest.raises(StorageUnavailable):
            FileStore(os.path.join(blocker, "store.json")).set("k", "v")


def test_guarded_store_degrades_on_failure():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "store.json")
        with open(path, "w") as f:
            f.write("not json")
        guarded = GuardedStore(FileStore(path))

        assert guarded.get("scrumUsers") is None
        assert guarded.degraded


def test_guarded_store_clears_degraded_after_successful_write():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "store.json")
        with open(path, "w") as f:
            f.write("not json")
        guarded = GuardedStore(FileStore(path))

        assert guarded.get("scrumUsers") is None
        assert guarded.degraded

        assert guarded.set("scrumUsers", "[]") is True
        assert not guarded.degraded
        assert guarded.get("scrumUsers") == "[]"


def test_guarded_store_without_backend():
    guarded = GuardedStore(None)

    assert guarded.get("k") is None
    assert guarded.set("k", "v") is False
    assert guarded.remove("k") is False
    assert guarded.degraded


def test_guarded_store_passes_through():
    backend = MemoryStore()
    guarded = GuardedStore(backend)

    assert guarded.set("k", "v") is True
    assert guarded.get("k") == "v"
    assert guarded.remove("k") is True
    assert backend.snapshot() == {}
    assert not guarded.degraded


def test_canonical_json_is_key_sorted_and_compact():
    obj = {"spoken": False, "lastName": "Doe", "firstName": "Jane"}

    assert canonical_json_str(obj) == '{"firstName":"Jane","lastName":"Doe","spoken":false}'


def test_pretty_json_keeps_order_and_unicode():
    text = pretty_json_str([{"firstName": "Zoë", "lastName": "Ång"}])

    assert text.startswith('[\n  {\n    "firstName": "Zoë"')
    assert "Ång" in text
