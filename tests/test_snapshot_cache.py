import os
import pytest
from app.services.stats.errors import CacheWriteFailure
from app.services.stats.snapshot_cache import SnapshotCacheStore


def test_empty_store_returns_none_and_creates_schema(cache_store, settings):
    assert cache_store.get() is None
    assert os.path.exists(settings.snapshot_cache_path)
    # Second open is a no-op on the existing table
    assert cache_store.get() is None


def test_round_trip_is_byte_identical(cache_store, sample_snapshot):
    written = 1_760_000_000_000
    cache_store.put(sample_snapshot, written)
    entry = cache_store.get()
    assert entry.snapshot == sample_snapshot
    assert entry.timestamp >= written


def test_put_replaces_whole_entry(cache_store):
    cache_store.put(b"first", 1000)
    cache_store.put(b"second", 5000)
    entry = cache_store.get()
    assert entry.snapshot == b"second"
    assert entry.timestamp == 5000


def test_timestamp_never_moves_backwards(cache_store):
    cache_store.put(b"first", 5000)
    cache_store.put(b"second", 1000)
    entry = cache_store.get()
    assert entry.snapshot == b"second"
    assert entry.timestamp == 5000


def test_entry_survives_reopen(settings):
    store = SnapshotCacheStore(settings.snapshot_cache_path)
    store.put(b"persisted", 42)
    store.close()

    reopened = SnapshotCacheStore(settings.snapshot_cache_path)
    try:
        assert reopened.get().snapshot == b"persisted"
    finally:
        reopened.close()


def test_clear(cache_store):
    assert cache_store.clear() is False
    cache_store.put(b"x", 1)
    assert cache_store.clear() is True
    assert cache_store.get() is None


def test_disabled_store_acts_absent(settings):
    store = SnapshotCacheStore(settings.snapshot_cache_path, enabled=False)
    assert store.get() is None
    with pytest.raises(CacheWriteFailure):
        store.put(b"x", 1)
    assert not os.path.exists(settings.snapshot_cache_path)


def test_unavailable_store_is_not_fatal(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("occupied")
    store = SnapshotCacheStore(str(blocker / "cache.db"))
    try:
        assert store.get() is None
        with pytest.raises(CacheWriteFailure):
            store.put(b"x", 1)
    finally:
        store.close()
