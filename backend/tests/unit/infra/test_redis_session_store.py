# tests/unit/infra/test_redis_session_store.py
"""
Unit tests for RedisSessionStore using fakeredis.

They use fakeredis.FakeRedis so they run entirely in-memory.
"""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import fakeredis
import pytest

from authcore.infra.redis import RedisSessionStore
from authcore.services._shared.dto import RefreshSessionRecord


def _now() -> datetime:
    """Return a timezone-aware UTC "now"."""
    return datetime.now(UTC)


def _record(*, expires_in: timedelta = timedelta(hours=1)) -> RefreshSessionRecord:
    now = _now()
    return RefreshSessionRecord(
        id=str(uuid4()),
        account_id="acc-1",
        token_hash="cd" * 32,
        created_at=now,
        expires_at=now + expires_in,
    )


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def store(fake_redis):
    return RedisSessionStore(r=fake_redis, grace_seconds=60)


def test_store_and_find_round_trip(store):
    record = _record()
    store.store(record)
    assert store.find_by_id(record.id) == record


def test_store_uses_hash_key_with_ttl_including_grace(store, fake_redis):
    record = _record(expires_in=timedelta(seconds=600))
    store.store(record)

    key = f"rs:{record.id}"
    assert fake_redis.type(key) == b"hash"
    ttl = fake_redis.ttl(key)
    assert 600 < ttl <= 660


def test_expired_record_still_readable_within_grace(store):
    record = _record(expires_in=timedelta(seconds=-5))
    store.store(record)
    found = store.find_by_id(record.id)
    assert found is not None
    assert found.expires_at <= _now()


def test_find_missing_returns_none(store):
    assert store.find_by_id("nope") is None


def test_delete_is_single_winner_and_idempotent(store):
    record = _record()
    store.store(record)

    assert store.delete_by_id(record.id) is True
    assert store.delete_by_id(record.id) is False
    assert store.find_by_id(record.id) is None


def test_concurrent_deletes_have_one_winner(store):
    record = _record()
    store.store(record)
    workers = 6
    barrier = threading.Barrier(workers)
    results: list[bool] = []
    lock = threading.Lock()

    def attempt():
        barrier.wait()
        won = store.delete_by_id(record.id)
        with lock:
            results.append(won)

    threads = [threading.Thread(target=attempt) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1


def test_purge_expired_is_a_noop(store):
    store.store(_record(expires_in=timedelta(seconds=-5)))
    assert store.purge_expired(_now()) == 0


def test_decodes_string_clients_too():
    r = fakeredis.FakeRedis(decode_responses=True)
    store = RedisSessionStore(r=r)
    record = _record()
    store.store(record)
    assert store.find_by_id(record.id) == record
