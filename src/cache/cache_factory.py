# src/cache/cache_factory.py — v3
"""Factory for per-stage result stores."""

from __future__ import annotations

from nutriguard.cache.base_cache_store import BaseResultStore
from nutriguard.config.settings import Settings


def create_result_store(
    namespace: str,
    schema_version: str,
    settings: Settings | None = None,
) -> BaseResultStore | None:
    """Instantiate the result store for one stage.

    Args:
        namespace: Stage directory under the cache root ("food", "health").
        schema_version: Version of the payload schema the stage produces.
        settings: Application settings. Defaults are used when None.

    Returns:
        Configured store, or None when caching is disabled.
    """
    settings = settings or Settings()
    if not settings.cache_enabled:
        return None

    from nutriguard.cache.json_store import JsonResultStore

    return JsonResultStore(
        cache_root=settings.cache_root.expanduser() / namespace,
        ttl_seconds=settings.cache_ttl_seconds,
        schema_version=schema_version,
    )
