# src/cache/json_store.py — v3
"""JSON file-based result store.

One ``<fingerprint>.json`` file per entry under the store root. Writes go to
a temporary file in the same directory and are renamed into place, so a
reader sees either the old file, the new file, or nothing. No locks are
taken: concurrent writers for one key race and the last rename wins.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from nutriguard.cache.base_cache_store import BaseResultStore
from nutriguard.cache.models import CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JsonResultStore(BaseResultStore):
    """File-based result store with TTL and schema-version checks."""

    def __init__(
        self,
        cache_root: Path | str,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        schema_version: str = "1.0",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._root = Path(cache_root).expanduser()
        self._ttl_seconds = ttl_seconds
        self._schema_version = schema_version
        self._clock = clock

    @property
    def root(self) -> Path:
        return self._root

    async def get(self, key: str) -> dict[str, Any] | None:
        """Return the cached payload, or None if missing, stale or corrupt."""
        path = self._entry_path(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Failed to read cache entry %s: %s", key, e)
            self._discard(path)
            return None

        try:
            entry = CacheEntry.model_validate(json.loads(raw.decode("utf-8")))
        except ValueError as e:
            # UnicodeDecodeError, JSONDecodeError and pydantic ValidationError are all ValueError
            logger.warning("Discarding corrupt cache entry %s: %s", key, e)
            self._discard(path)
            return None

        if entry.schema_version != self._schema_version:
            logger.info(
                "Discarding cache entry %s with schema %r (current %r)",
                key, entry.schema_version, self._schema_version,
            )
            self._discard(path)
            return None

        age = entry.age_seconds(self._clock())
        if age < 0 or age > self._ttl_seconds:
            # a storedAt in the future counts as stale
            logger.debug("Cache entry %s stale (age %.0fs)", key, age)
            self._discard(path)
            return None

        return entry.result

    async def put(self, key: str, payload: dict[str, Any]) -> None:
        """Atomically write a payload. Failures are logged, never raised."""
        path = self._entry_path(key)
        entry = CacheEntry(
            fingerprint=key,
            stored_at=self._clock(),
            result=payload,
            schema_version=self._schema_version,
        )
        tmp_name: str | None = None
        try:
            data = entry.to_json()
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to cache result %s: %s", key, e)
        finally:
            if tmp_name is not None:
                self._discard(Path(tmp_name))

    async def delete(self, key: str) -> None:
        """Remove an entry if present."""
        self._discard(self._entry_path(key))

    def _discard(self, path: Path) -> None:
        """Best-effort unlink; a missing file is not an error."""
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not delete cache file %s: %s", path, e)

    def _entry_path(self, key: str) -> Path:
        """Return file path for a cache key."""
        safe_key = key.replace("/", "_").replace("\\", "_").replace("..", "_")
        return self._root / f"{safe_key}.json"
