# src/core/models.py — v2
"""Shared Pydantic domain models used across modules.

HealthCondition is owned by the profile store and only read here.
UploadedFile describes a temporary upload handed over by the transport layer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

ConditionType = Literal["chronic_disease", "allergy", "dietary_restriction", "medication"]


# === HEALTH PROFILE ===


class HealthCondition(BaseModel):
    """One condition relevant to food suitability, derived from a stored profile."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None
    name: str
    description: str = ""
    severity: str = "moderate"
    type: ConditionType
    status: str = "active"

    @property
    def slug(self) -> str:
        """Lowercase underscore form of the name, used as a prompt key."""
        return "_".join(self.name.lower().split())


# === UPLOADS ===


class UploadedFile(BaseModel):
    """Already-received temporary upload plus its client-declared metadata."""

    model_config = ConfigDict(frozen=True)

    path: Path
    original_name: str
    mime_type: str = ""
    size: int | None = None
