# src/pipeline/models.py — v1
"""Per-stage request and result models.

Requests are frozen: once a request has been fingerprinted, nothing may
change the fields the fingerprint was computed from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from nutriguard.core.models import HealthCondition
from nutriguard.llm.models import ImageInput


class FoodImageRequest(BaseModel):
    """Validated label photograph, read into memory."""

    model_config = ConfigDict(frozen=True)

    image: ImageInput
    filename: str


class HealthAnalysisRequest(BaseModel):
    """Food data from the first stage plus the user's conditions."""

    model_config = ConfigDict(frozen=True)

    food_data: dict[str, Any]
    conditions: list[HealthCondition] = Field(default_factory=list)


@dataclass
class StageResult:
    """Outcome of one stage run."""

    data: dict[str, Any]
    from_cache: bool = False
    cache_key: str | None = None
    processing_time_ms: int = 0
    degraded: bool = False
    invoked: bool = False
