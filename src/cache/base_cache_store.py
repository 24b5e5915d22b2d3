# src/cache/base_cache_store.py — v2
"""Abstract result store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseResultStore(ABC):
    """Fingerprint-keyed store of prior analysis results.

    Implementations never raise from get/put: a corrupt or stale entry is a
    miss, and a failed write only costs a future cache miss.
    """

    @abstractmethod
    async def get(self, key: str) -> dict[str, Any] | None:
        """Return the cached payload for a fingerprint, or None."""

    @abstractmethod
    async def put(self, key: str, payload: dict[str, Any]) -> None:
        """Store a payload under a fingerprint (best effort)."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove an entry (best effort)."""
