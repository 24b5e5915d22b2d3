# src/schemas/merger.py — v1
"""Reconcile partial model output with a fixed default schema.

merge() is total: whatever the model returned, the result has every key the
schema declares, with a concrete value or an explicit None / empty container.
Keys the schema does not declare are kept as-is, at any depth.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from nutriguard.core.errors import ErrorCode, ExtractionError


@dataclass(frozen=True)
class Bound:
    """Numeric range for a score-like field; bad values fall back to ``floor``."""

    low: float
    high: float
    floor: float | None = 0

    def coerce(self, value: Any) -> float | int | None:
        number = _as_number(value)
        if number is None or not (self.low <= number <= self.high):
            return self.floor
        return number


@dataclass(frozen=True)
class SchemaSpec:
    """Declarative shape of a stage payload.

    Paths are dotted from the payload root, e.g. ``"nutrition.macros"``.
    """

    name: str
    version: str
    defaults: Callable[[], dict[str, Any]]
    array_fields: frozenset[str] = frozenset()
    bounded_fields: Mapping[str, Bound] = field(default_factory=dict)
    required_fields: tuple[str, ...] = ()

    def default_payload(self) -> dict[str, Any]:
        """Fresh fully-defaulted payload (the degraded result)."""
        return self.defaults()


def merge(extracted: Mapping[str, Any] | None, schema: SchemaSpec) -> dict[str, Any]:
    """Overlay ``extracted`` on the schema defaults, nested objects key-by-key."""
    source = extracted if isinstance(extracted, Mapping) else {}
    return _merge_object(source, schema.defaults(), schema, prefix="")


def check_required(extracted: Mapping[str, Any], schema: SchemaSpec) -> None:
    """Reject payloads that lack a field the stage cannot do without.

    Raises:
        ExtractionError: INVALID_STRUCTURE naming the missing fields.
    """
    missing = [
        key for key in schema.required_fields
        if extracted.get(key) is None or extracted.get(key) == ""
    ]
    if missing:
        raise ExtractionError(
            ErrorCode.INVALID_STRUCTURE,
            f"Invalid {schema.name} response structure: missing {', '.join(missing)}",
            details={"missing": missing},
        )


def _merge_object(
    source: Mapping[str, Any],
    defaults: dict[str, Any],
    schema: SchemaSpec,
    prefix: str,
) -> dict[str, Any]:
    out = dict(defaults)
    for key, value in source.items():
        if key not in defaults:
            out[key] = value

    for key, default in defaults.items():
        path = f"{prefix}{key}"
        present = key in source
        value = source.get(key)

        if path in schema.bounded_fields:
            out[key] = schema.bounded_fields[path].coerce(value) if present else default
        elif path in schema.array_fields:
            out[key] = list(value) if isinstance(value, list) else default
        elif isinstance(default, dict):
            nested = value if isinstance(value, Mapping) else {}
            out[key] = _merge_object(nested, default, schema, f"{path}.")
        elif present:
            out[key] = value
    return out


def _as_number(value: Any) -> float | int | None:
    # bool is an int subclass but never a valid score
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() else number
    return None
