# tests/unit/cache/test_unit_cache_factory.py — v4
"""Tests for cache/cache_factory.py."""

from __future__ import annotations

from nutriguard.cache.cache_factory import create_result_store
from nutriguard.cache.json_store import JsonResultStore
from nutriguard.config.settings import Settings


class TestCreateResultStore:
    def test_namespaced_json_store(self, tmp_path):
        s = Settings(_env_file=None, cache_root=tmp_path, cache_ttl_hours=2)
        store = create_result_store("health", "2.0", s)
        assert isinstance(store, JsonResultStore)
        assert store.root == tmp_path / "health"
        assert store._ttl_seconds == 7200
        assert store._schema_version == "2.0"

    def test_disabled_returns_none(self, tmp_path):
        s = Settings(_env_file=None, cache_root=tmp_path, cache_enabled=False)
        assert create_result_store("food", "1.0", s) is None
