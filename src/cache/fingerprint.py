# src/cache/fingerprint.py — v4
"""Content fingerprints used as cache keys.

Callers pass only the fields that affect the analysis outcome. Volatile
metadata (timestamps, request ids, upload names) must stay out, or two
semantically identical requests will miss the cache.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Mapping

if TYPE_CHECKING:
    from nutriguard.core.models import HealthCondition

# Food-data fields that influence the health analysis.
HEALTH_FOOD_FIELDS = ("productName", "ingredients", "nutrition", "allergens")


def compute_fingerprint(semantic_fields: Any) -> str:
    """SHA-256 hex digest of the canonical form of ``semantic_fields``.

    Raw bytes (an uploaded image) are digested as-is. Anything else is
    serialized as JSON with sorted keys and compact separators first.
    """
    if isinstance(semantic_fields, (bytes, bytearray, memoryview)):
        return hashlib.sha256(bytes(semantic_fields)).hexdigest()
    return hashlib.sha256(canonical_bytes(semantic_fields)).hexdigest()


def canonical_bytes(value: Any) -> bytes:
    """Stable byte serialization: sorted keys, no whitespace, UTF-8."""
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=_encode_default,
    ).encode("utf-8")


def health_semantic_fields(
    food_data: Mapping[str, Any],
    conditions: Iterable[HealthCondition],
) -> dict[str, Any]:
    """Select the inputs that determine a health-suitability result.

    Condition descriptors are reduced to (id, name, type) and sorted, so the
    order a profile lists them in does not change the key.
    """
    descriptors = sorted(
        ({"id": c.id, "name": c.name, "type": c.type} for c in conditions),
        key=lambda d: (d["type"], str(d["id"] or ""), d["name"]),
    )
    return {
        "foodData": {k: food_data.get(k) for k in HEALTH_FOOD_FIELDS},
        "conditions": descriptors,
    }


def _encode_default(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return {"__sha256__": hashlib.sha256(bytes(obj)).hexdigest()}
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not fingerprintable")
