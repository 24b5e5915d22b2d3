# src/profile/conditions.py — v1
"""Turn a stored health profile document into HealthCondition records.

Profiles list entries either as objects (``{"name", "severity", ...}``) or
as plain strings, under several field names depending on how they were
captured. Each list maps to one condition type.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from nutriguard.core.models import ConditionType, HealthCondition

# condition type -> profile fields holding entries of that type
_SOURCE_FIELDS: tuple[tuple[ConditionType, tuple[str, ...]], ...] = (
    ("chronic_disease", ("chronicDiseases", "healthConditions", "otherHealthConditions")),
    ("allergy", ("allergies", "foodAllergies", "otherAllergies")),
    ("dietary_restriction", ("dietaryRestrictions", "otherDietaryRestrictions")),
    ("medication", ("medications",)),
)


def derive_health_conditions(profile: Mapping[str, Any] | None) -> list[HealthCondition]:
    """All conditions recorded in ``profile``, in profile order."""
    if not profile:
        return []

    conditions: list[HealthCondition] = []
    for cond_type, fields in _SOURCE_FIELDS:
        for entry in _entries(profile, fields):
            condition = _to_condition(cond_type, entry)
            if condition is not None:
                conditions.append(condition)
    return conditions


def _entries(profile: Mapping[str, Any], fields: Iterable[str]) -> Iterable[Any]:
    for field in fields:
        values = profile.get(field) or []
        if isinstance(values, (str, Mapping)):
            values = [values]
        yield from values


def _to_condition(cond_type: ConditionType, entry: Any) -> HealthCondition | None:
    if isinstance(entry, str):
        entry = {"name": entry}
    if not isinstance(entry, Mapping):
        return None
    base_name = str(entry.get("name") or "").strip()
    if not base_name:
        return None

    raw_id = entry.get("_id") or entry.get("id")
    cond_id = str(raw_id) if raw_id else f"{cond_type}:{'_'.join(base_name.lower().split())}"
    severity = entry.get("severity")

    if cond_type == "chronic_disease":
        name = base_name
        description = entry.get("description") or f"Chronic disease: {base_name}"
        severity = severity or "moderate"
    elif cond_type == "allergy":
        name = f"{base_name} Allergy"
        description = f"Allergic reaction to {base_name}. Severity: {severity or 'unknown'}"
        severity = severity or "moderate"
    elif cond_type == "dietary_restriction":
        name = f"{base_name} Dietary Restriction"
        description = entry.get("description") or f"Dietary restriction: {base_name}"
        severity = "moderate"
    else:
        name = f"Medication: {base_name}"
        dosage = f" ({entry['dosage']})" if entry.get("dosage") else ""
        description = f"Currently taking {base_name}{dosage}. May have food interactions."
        severity = "moderate"

    return HealthCondition(
        id=cond_id,
        name=name,
        description=description,
        severity=str(severity),
        type=cond_type,
        status="active",
    )
