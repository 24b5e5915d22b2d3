# tests/unit/cache/test_unit_json_store.py — v2
"""Tests for cache/json_store.py — TTL, schema version, corruption, atomic writes."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from nutriguard.cache.json_store import JsonResultStore

KEY = "a" * 64
T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class _Clock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> _Clock:
    return _Clock(T0)


@pytest.fixture
def store(tmp_cache_dir, clock) -> JsonResultStore:
    return JsonResultStore(tmp_cache_dir, ttl_seconds=3600, schema_version="1.0", clock=clock)


class TestJsonResultStore:
    @pytest.mark.asyncio
    async def test_miss(self, store):
        assert await store.get(KEY) is None

    @pytest.mark.asyncio
    async def test_put_then_get(self, store):
        await store.put(KEY, {"productName": "Oat Bar"})
        assert await store.get(KEY) == {"productName": "Oat Bar"}

    @pytest.mark.asyncio
    async def test_envelope_on_disk(self, store, tmp_cache_dir):
        await store.put(KEY, {"x": 1})
        raw = json.loads((tmp_cache_dir / f"{KEY}.json").read_text())
        assert raw == {
            "storedAt": T0.isoformat().replace("+00:00", "Z"),
            "result": {"x": 1},
            "schemaVersion": "1.0",
        }

    @pytest.mark.asyncio
    async def test_no_temp_files_left(self, store, tmp_cache_dir):
        await store.put(KEY, {"x": 1})
        assert [p.name for p in tmp_cache_dir.iterdir()] == [f"{KEY}.json"]

    @pytest.mark.asyncio
    async def test_expired_entry_deleted(self, store, clock, tmp_cache_dir):
        await store.put(KEY, {"x": 1})
        clock.now = T0 + timedelta(seconds=3601)
        assert await store.get(KEY) is None
        assert not (tmp_cache_dir / f"{KEY}.json").exists()

    @pytest.mark.asyncio
    async def test_entry_within_ttl(self, store, clock):
        await store.put(KEY, {"x": 1})
        clock.now = T0 + timedelta(seconds=3599)
        assert await store.get(KEY) == {"x": 1}

    @pytest.mark.asyncio
    async def test_schema_mismatch_is_miss(self, tmp_cache_dir, clock):
        old = JsonResultStore(tmp_cache_dir, schema_version="1.0", clock=clock)
        new = JsonResultStore(tmp_cache_dir, schema_version="2.0", clock=clock)
        await old.put(KEY, {"x": 1})
        assert await new.get(KEY) is None
        assert not (tmp_cache_dir / f"{KEY}.json").exists()

    @pytest.mark.asyncio
    async def test_corrupt_entry_discarded(self, store, tmp_cache_dir):
        path = tmp_cache_dir / f"{KEY}.json"
        path.write_text("{not json", encoding="utf-8")
        assert await store.get(KEY) is None
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_non_utf8_entry_discarded(self, store, tmp_cache_dir):
        path = tmp_cache_dir / f"{KEY}.json"
        path.write_bytes(b"\xff\xfe\x00garbage\x80")
        assert await store.get(KEY) is None
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_entry_missing_result_discarded(self, store, tmp_cache_dir):
        path = tmp_cache_dir / f"{KEY}.json"
        path.write_text(json.dumps({"storedAt": T0.isoformat(), "schemaVersion": "1.0"}))
        assert await store.get(KEY) is None
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_overwrite_last_wins(self, store):
        await store.put(KEY, {"v": 1})
        await store.put(KEY, {"v": 2})
        assert await store.get(KEY) == {"v": 2}

    @pytest.mark.asyncio
    async def test_unserializable_payload_not_raised(self, store, tmp_cache_dir):
        await store.put(KEY, {"bad": object()})
        assert list(tmp_cache_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.put(KEY, {"x": 1})
        await store.delete(KEY)
        assert await store.get(KEY) is None
        await store.delete(KEY)

    @pytest.mark.asyncio
    async def test_creates_root_lazily(self, tmp_path, clock):
        store = JsonResultStore(tmp_path / "nested" / "food", clock=clock)
        await store.put(KEY, {"x": 1})
        assert (tmp_path / "nested" / "food" / f"{KEY}.json").exists()

    def test_key_sanitized(self, store, tmp_cache_dir):
        path = store._entry_path("../escape")
        assert path.parent == tmp_cache_dir

    @pytest.mark.asyncio
    async def test_expired_then_reput(self, store, clock):
        await store.put(KEY, {"v": 1})
        clock.now = T0 + timedelta(hours=2)
        assert await store.get(KEY) is None
        await store.put(KEY, {"v": 2})
        assert await store.get(KEY) == {"v": 2}

    @pytest.mark.asyncio
    async def test_future_timestamp_is_stale(self, store, clock, tmp_cache_dir):
        clock.now = T0 + timedelta(days=365)
        await store.put(KEY, {"x": 1})
        clock.now = T0
        assert await store.get(KEY) is None
        assert not (tmp_cache_dir / f"{KEY}.json").exists()
