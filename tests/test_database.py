"""Tests for the paste store and its in-memory backend."""

import threading

import pytest
from redis.exceptions import RedisError

from conftest import BrokenRedis
from pastr.database import (
    InMemoryStore,
    InsertResult,
    PasteStore,
    PasteStoreError,
    connect_redis,
)


class TestInMemoryStore:
    def test_set_nx_only_when_absent(self, memory_redis):
        assert memory_redis.set("k", "first", nx=True) is True
        assert memory_redis.set("k", "second", nx=True) is None
        assert memory_redis.get("k") == "first"

    def test_concurrent_set_nx_has_single_winner(self):
        redis = InMemoryStore()
        results = []
        barrier = threading.Barrier(8)

        def writer(value):
            barrier.wait()
            results.append(redis.set("same", value, nx=True))

        threads = [threading.Thread(target=writer, args=(str(i),)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 1
        assert results.count(None) == 7


class TestPasteStore:
    def test_insert_then_get(self, store):
        assert store.insert("abc", "hello world") is InsertResult.OK
        paste = store.get_by_id("abc")
        assert paste.id == "abc"
        assert paste.content == "hello world"
        assert paste.created_at.tzinfo is not None

    def test_insert_conflict_keeps_original(self, store):
        store.insert("abc", "original")
        assert store.insert("abc", "intruder") is InsertResult.CONFLICT
        assert store.get_by_id("abc").content == "original"

    def test_missing_paste_is_none(self, store):
        assert store.get_by_id("doesnotexist") is None

    def test_transport_failures_raise_store_error(self):
        broken = PasteStore(BrokenRedis())
        with pytest.raises(PasteStoreError):
            broken.insert("abc", "hello")
        with pytest.raises(PasteStoreError):
            broken.get_by_id("abc")

    def test_corrupt_record_raises_store_error(self, store, memory_redis):
        memory_redis.set("paste:bad", "not json")
        with pytest.raises(PasteStoreError, match="Corrupt record"):
            store.get_by_id("bad")

    def test_health(self, store):
        assert store.is_healthy()
        assert not PasteStore(BrokenRedis()).is_healthy()


UNREACHABLE_REDIS = "redis://127.0.0.1:1"


class TestConnectRedis:
    def test_falls_back_to_memory(self):
        client, using_fallback = connect_redis(UNREACHABLE_REDIS, socket_timeout=0.5)
        assert using_fallback
        assert isinstance(client, InMemoryStore)

    def test_fallback_store_is_usable(self):
        client, _ = connect_redis(UNREACHABLE_REDIS, socket_timeout=0.5)
        store = PasteStore(client, using_fallback=True)
        assert store.insert("abc", "hello") is InsertResult.OK
        assert store.get_by_id("abc").content == "hello"

    def test_reraises_without_fallback(self):
        with pytest.raises(RedisError):
            connect_redis(UNREACHABLE_REDIS, socket_timeout=0.5, allow_fallback=False)
