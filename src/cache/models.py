# src/cache/models.py — v2
"""Cache envelope model.

On disk an entry is ``{"storedAt", "result", "schemaVersion"}``; the
fingerprint is the file name and is filled in on read.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CacheEntry(BaseModel):
    """Stored analysis result for one fingerprint."""

    model_config = ConfigDict(populate_by_name=True)

    fingerprint: str = Field(default="", exclude=True)
    stored_at: datetime = Field(alias="storedAt")
    result: dict[str, Any]
    schema_version: str = Field(default="", alias="schemaVersion")

    @field_validator("stored_at")
    @classmethod
    def ensure_aware(cls, v: datetime) -> datetime:  # noqa: N805
        """Naive timestamps are taken as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def age_seconds(self, now: datetime) -> float:
        return (now - self.stored_at).total_seconds()

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
